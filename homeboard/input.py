"""Keyboard input: cbreak key reader and the blocking dispatch loop."""

from __future__ import annotations

import logging
import os
import select
import sys
import termios
import threading
import tty
from typing import Callable

from homeboard.errors import FatalInitError

logger = logging.getLogger(__name__)

ESCAPE = "<escape>"
UP = "<up>"
DOWN = "<down>"
RIGHT = "<right>"
LEFT = "<left>"

_ESCAPE_SEQUENCES = {
    "\x1b[A": UP,
    "\x1b[B": DOWN,
    "\x1b[C": RIGHT,
    "\x1b[D": LEFT,
    "\x1bOA": UP,
    "\x1bOB": DOWN,
    "\x1bOC": RIGHT,
    "\x1bOD": LEFT,
}

# Prefixes that may be the start of one of the sequences above, longest first.
_PARTIAL_SEQUENCES = ("\x1b[", "\x1bO", "\x1b")
ESCAPE_TIMEOUT_SECONDS = 0.05


def decode_keys(chunk: str) -> list[str]:
    """Split a chunk of terminal input into key names."""
    keys = []
    index = 0
    while index < len(chunk):
        if chunk[index] == "\x1b":
            sequence = chunk[index : index + 3]
            if sequence in _ESCAPE_SEQUENCES:
                keys.append(_ESCAPE_SEQUENCES[sequence])
                index += 3
                continue
            keys.append(ESCAPE)
        else:
            keys.append(chunk[index])
        index += 1
    return keys


def split_pending(chunk: str) -> tuple[str, str]:
    """Hold back a trailing partial escape sequence; returns (complete, pending)."""
    for prefix in _PARTIAL_SEQUENCES:
        if chunk.endswith(prefix):
            return chunk[: -len(prefix)], prefix
    return chunk, ""


class KeyReader:
    """Puts a terminal in cbreak mode for the duration of a ``with`` block."""

    def __init__(self, fd: int | None = None) -> None:
        self._fd = sys.stdin.fileno() if fd is None else fd
        self._saved: list | None = None
        self._pending = ""

    def __enter__(self) -> "KeyReader":
        try:
            self._saved = termios.tcgetattr(self._fd)
            tty.setcbreak(self._fd)
        except termios.error as exc:
            raise FatalInitError(f"Standard input is not a terminal: {exc}") from exc
        return self

    def __exit__(self, *exc_info: object) -> None:
        if self._saved is not None:
            termios.tcsetattr(self._fd, termios.TCSADRAIN, self._saved)
            self._saved = None

    def read_keys(self, timeout: float) -> list[str]:
        """Wait up to ``timeout`` seconds for input; returns the keys read.

        A chunk ending in ``ESC`` or ``ESC [`` is kept until the next read so
        an arrow key split across reads still decodes as one key. If nothing
        follows within ``ESCAPE_TIMEOUT_SECONDS`` it is a plain escape.
        """
        wait = ESCAPE_TIMEOUT_SECONDS if self._pending else timeout
        ready, _, _ = select.select([self._fd], [], [], wait)
        if not ready:
            pending, self._pending = self._pending, ""
            return decode_keys(pending)
        data = self._pending + os.read(self._fd, 32).decode("utf-8", errors="ignore")
        complete, self._pending = split_pending(data)
        return decode_keys(complete)


class EventLoop:
    """Blocking key dispatch loop; unknown keys are ignored."""

    def __init__(self, poll_seconds: float = 0.2) -> None:
        self._handlers: dict[str, Callable[[], object]] = {}
        self._stop_event = threading.Event()
        self._poll_seconds = poll_seconds

    def handle(self, key: str, handler: Callable[[], object]) -> None:
        self._handlers[key] = handler

    def stop(self) -> None:
        self._stop_event.set()

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def dispatch(self, key: str) -> bool:
        """Run the handler bound to ``key``; returns whether one existed."""
        handler = self._handlers.get(key)
        if handler is None:
            return False
        logger.debug("key_pressed %s", {"key": key})
        handler()
        return True

    def run(self, reader: KeyReader) -> None:
        while not self._stop_event.is_set():
            for key in reader.read_keys(self._poll_seconds):
                self.dispatch(key)
                if self._stop_event.is_set():
                    break


__all__ = [
    "DOWN",
    "ESCAPE",
    "ESCAPE_TIMEOUT_SECONDS",
    "LEFT",
    "RIGHT",
    "UP",
    "EventLoop",
    "KeyReader",
    "decode_keys",
    "split_pending",
]
