"""Full-screen terminal output via rich's Live display."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.live import Live

from homeboard.errors import FatalInitError
from homeboard.logic.layout import ScreenGeometry, apply_geometry, compute_geometry
from homeboard.rendering.composer import compose_screen
from homeboard.rendering.widgets import DashboardState

logger = logging.getLogger(__name__)


class Screen:
    """Scoped alternate-screen display; every redraw repaints the whole layout."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()
        width, height = self._console.size
        self.geometry: ScreenGeometry = compute_geometry(width, height)
        self._live: Live | None = None

    @property
    def size(self) -> tuple[int, int]:
        return self.geometry.term_width, self.geometry.term_height

    def new_state(self) -> DashboardState:
        """Empty dashboard state sized for this terminal."""
        state = DashboardState(term_width=self.geometry.term_width, term_height=self.geometry.term_height)
        apply_geometry(state, self.geometry)
        return state

    def __enter__(self) -> "Screen":
        try:
            self._live = Live(
                console=self._console,
                screen=True,
                auto_refresh=False,
                redirect_stdout=False,
                redirect_stderr=False,
            )
            self._live.start()
        except Exception as exc:
            self._live = None
            raise FatalInitError(f"Could not initialize the terminal display: {exc}") from exc
        return self

    def __exit__(self, *exc_info: object) -> None:
        if self._live is not None:
            self._live.stop()
            self._live = None

    def redraw(self, state: DashboardState) -> None:
        """Repaint the entire screen from ``state``."""
        if self._live is None:
            return
        self._live.update(compose_screen(state, self.geometry), refresh=True)


__all__ = ["Screen"]
