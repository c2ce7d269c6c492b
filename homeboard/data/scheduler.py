"""Threaded periodic tasks that drive the dashboard refreshes."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable

logger = logging.getLogger(__name__)


class PeriodicTask:
    """Run an action after an initial delay, then every ``interval_seconds``."""

    def __init__(
        self,
        name: str,
        interval_seconds: float,
        action: Callable[[], None],
        initial_delay_seconds: float = 1.0,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError(f"Interval for task '{name}' must be positive, got {interval_seconds}")
        self.name = name
        self._interval_seconds = interval_seconds
        self._action = action
        self._initial_delay_seconds = initial_delay_seconds
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self.runs = 0

    def start(self) -> None:
        """Start the background thread."""
        if self._thread and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run_loop, name=f"task-{self.name}", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Signal the thread to stop; an action already running is not interrupted."""
        self._stop_event.set()

    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def join(self, timeout: float | None = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    def _run_loop(self) -> None:
        if self._stop_event.wait(timeout=self._initial_delay_seconds):
            return
        next_run = time.monotonic()
        while not self._stop_event.is_set():
            self._run_once()
            # Fixed-rate ticks; ticks missed while the action ran are dropped.
            next_run += self._interval_seconds
            now = time.monotonic()
            if next_run < now:
                missed = int((now - next_run) // self._interval_seconds) + 1
                next_run += missed * self._interval_seconds
            self._stop_event.wait(timeout=next_run - now)

    def _run_once(self) -> None:
        try:
            self._action()
        except Exception:
            logger.exception("task_failed %s", {"task": self.name})
        self.runs += 1


class Scheduler:
    """Owns a set of independent periodic tasks."""

    def __init__(self, initial_delay_seconds: float = 1.0) -> None:
        self._initial_delay_seconds = initial_delay_seconds
        self._tasks: list[PeriodicTask] = []

    @property
    def tasks(self) -> list[PeriodicTask]:
        return list(self._tasks)

    def every(self, interval_seconds: float, action: Callable[[], None], name: str) -> PeriodicTask:
        """Register and start a task; returns its handle."""
        task = PeriodicTask(name, interval_seconds, action, self._initial_delay_seconds)
        self._tasks.append(task)
        task.start()
        logger.info("task_started %s", {"task": name, "interval_seconds": interval_seconds})
        return task

    def stop_all(self) -> None:
        for task in self._tasks:
            task.stop()


__all__ = ["PeriodicTask", "Scheduler"]
