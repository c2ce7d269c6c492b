"""Block-letter clock glyphs."""

from __future__ import annotations

from datetime import datetime

from pyfiglet import Figlet

CLOCK_FORMAT = "%H:%M:%S"
CLOCK_FONT = "ogre"

_figlet = Figlet(font=CLOCK_FONT, width=200)


def _trim_empty_rows(lines: list[str]) -> list[str]:
    while lines and not lines[-1].strip():
        lines.pop()
    while lines and not lines[0].strip():
        lines.pop(0)
    return lines


def clock_rows(moment: datetime) -> list[str]:
    """Render ``HH:MM:SS`` as figlet rows, one string per glyph row."""
    art = _figlet.renderText(moment.strftime(CLOCK_FORMAT))
    return _trim_empty_rows([line.rstrip() for line in art.splitlines()])


__all__ = ["CLOCK_FORMAT", "clock_rows"]
