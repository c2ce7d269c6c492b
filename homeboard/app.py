"""Wires the refresh tasks, the screen and the light keys together."""

from __future__ import annotations

from contextlib import ExitStack
import logging
from pathlib import Path

from homeboard.config import AppConfig, LoggingConfig
from homeboard.data.http_client import JsonClient
from homeboard.data.scheduler import Scheduler
from homeboard.errors import FatalInitError
from homeboard.input import DOWN, ESCAPE, UP, EventLoop, KeyReader
from homeboard.lights import controller as transforms
from homeboard.lights.bridge import HueBridge
from homeboard.lights.controller import Bridge, LightController
from homeboard.refresh import Refresher
from homeboard.rendering.screen import Screen

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_FATAL_INIT = 2

QUIT_KEY = "q"
LOG_FILE_NAME = "homeboard.log"


def configure_logging(log: LoggingConfig) -> Path:
    """Send logs to a file; the terminal belongs to the dashboard."""
    log_dir = Path(log.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / LOG_FILE_NAME
    logging.basicConfig(
        filename=str(log_path),
        level=getattr(logging, str(log.level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    return log_path


def bind_light_keys(loop: EventLoop, controller: LightController) -> None:
    loop.handle("r", lambda: controller.apply_to_all(transforms.standard_on))
    loop.handle("s", lambda: controller.apply_to_all(transforms.standard_color))
    loop.handle("w", lambda: controller.apply_to_all(transforms.white))
    loop.handle(ESCAPE, lambda: controller.apply_to_all(transforms.toggle))
    loop.handle(UP, lambda: controller.apply_to_all(transforms.brighten))
    loop.handle(DOWN, lambda: controller.apply_to_all(transforms.dim))
    loop.handle("b", controller.wind_down)


class Dashboard:
    """Top-level application: one input loop plus background refresh tasks."""

    def __init__(
        self,
        config: AppConfig,
        screen: Screen | None = None,
        client: JsonClient | None = None,
        bridge: Bridge | None = None,
    ) -> None:
        self._config = config
        self._screen = screen or Screen()
        self._client = client or JsonClient()
        if bridge is None and config.hue is not None:
            bridge = HueBridge(config.hue.ip, config.hue.username)
        self._loop = EventLoop()
        self._loop.handle(QUIT_KEY, self._loop.stop)
        self._exit_code = EXIT_OK
        self._controller: LightController | None = None
        if bridge is not None:
            self._controller = LightController(bridge, on_fatal=self._on_lights_fatal)
            bind_light_keys(self._loop, self._controller)
        else:
            logger.warning("lights_disabled %s", {"reason": "no hue section in config"})

    @property
    def loop(self) -> EventLoop:
        return self._loop

    def _on_lights_fatal(self, exc: FatalInitError) -> None:
        self._exit_code = EXIT_FATAL_INIT
        self._loop.stop()

    def run(self, reader: KeyReader | None = None) -> int:
        refresh = self._config.refresh
        scheduler = Scheduler(initial_delay_seconds=refresh.initial_delay_seconds)
        with ExitStack() as stack:
            stack.callback(self._shutdown, scheduler)
            screen = stack.enter_context(self._screen)
            keys = stack.enter_context(reader or KeyReader())

            state = screen.new_state()
            refresher = Refresher(
                state,
                self._client,
                self._config.transit,
                self._config.weather,
                redraw=screen.redraw,
            )
            screen.redraw(state)

            scheduler.every(refresh.clock_seconds, refresher.update_clock, "clock")
            scheduler.every(
                refresh.schedules_seconds, refresher.update_schedules_and_traffic, "schedules"
            )
            scheduler.every(refresh.weather_seconds, refresher.update_weather_and_today, "weather")

            logger.info("dashboard_started %s", {"size": screen.size})
            self._loop.run(keys)

        logger.info("dashboard_stopped %s", {"exit_code": self._exit_code})
        return self._exit_code

    def _shutdown(self, scheduler: Scheduler) -> None:
        scheduler.stop_all()
        if self._controller is not None:
            self._controller.shutdown()


__all__ = [
    "EXIT_CONFIG_ERROR",
    "EXIT_FATAL_INIT",
    "EXIT_OK",
    "Dashboard",
    "bind_light_keys",
    "configure_logging",
]
