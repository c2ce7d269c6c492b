"""Apply state transforms to every light behind the bridge."""

from __future__ import annotations

from concurrent.futures import Future
from dataclasses import replace
import logging
import threading
from typing import Callable, Protocol

from homeboard.errors import FatalInitError, FetchError
from homeboard.lights.bridge import MAX_BRIGHTNESS, MIN_BRIGHTNESS, Light, LightState

logger = logging.getLogger(__name__)

STANDARD_XY = (0.38, 0.38)
WHITE_XY = (0.35, 0.35)
ORANGE_XY = (0.58, 0.36)
BRIGHTNESS_STEP = 40

WIND_DOWN_BRIGHTNESS = 30
WIND_DOWN_DIM_BRIGHTNESS = 1
WIND_DOWN_DIM_AFTER_SECONDS = 60
WIND_DOWN_OFF_AFTER_SECONDS = 120

Transform = Callable[[LightState], LightState]


class Bridge(Protocol):
    def get_all_lights(self) -> list[Light]: ...

    def set_light_state(self, light_id: str, state: LightState) -> None: ...


def _clamp_brightness(value: int) -> int:
    return max(MIN_BRIGHTNESS, min(MAX_BRIGHTNESS, value))


def standard_on(state: LightState) -> LightState:
    return replace(state, xy=STANDARD_XY, bri=MAX_BRIGHTNESS, on=True)


def standard_color(state: LightState) -> LightState:
    return replace(state, xy=STANDARD_XY)


def white(state: LightState) -> LightState:
    return replace(state, xy=WHITE_XY)


def toggle(state: LightState) -> LightState:
    return replace(state, on=not state.on)


def brighten(state: LightState) -> LightState:
    return replace(state, bri=_clamp_brightness(state.bri + BRIGHTNESS_STEP))


def dim(state: LightState) -> LightState:
    return replace(state, bri=_clamp_brightness(state.bri - BRIGHTNESS_STEP))


def wind_down_start(state: LightState) -> LightState:
    return replace(state, xy=ORANGE_XY, bri=WIND_DOWN_BRIGHTNESS, on=True)


def wind_down_dim(state: LightState) -> LightState:
    return replace(state, bri=WIND_DOWN_DIM_BRIGHTNESS)


def power_off(state: LightState) -> LightState:
    return replace(state, on=False)


class LightController:
    """Runs each light transform on its own daemon thread so the input loop never blocks.

    Results and failures come back through one ``Future`` per call.
    ``shutdown`` cuts a running wind-down short at its next delay, and the
    daemon threads never hold the process open once the input loop exits.
    """

    def __init__(
        self,
        bridge: Bridge,
        on_fatal: Callable[[FatalInitError], None],
        sleep: Callable[[float], object] | None = None,
    ) -> None:
        self._bridge = bridge
        self._on_fatal = on_fatal
        self._stop_event = threading.Event()
        self._sleep = sleep or self._stop_event.wait

    def apply_to_all(self, transform: Transform) -> Future:
        """Apply ``transform`` to every light in the background."""
        return self._submit(transform.__name__, self.apply_now, transform)

    def wind_down(self) -> Future:
        """Orange at low brightness, nearly off a minute later, off two minutes after that."""
        return self._submit("wind_down", self._run_wind_down)

    def apply_now(self, transform: Transform) -> int:
        """Apply ``transform`` to every light on the calling thread; returns lights written."""
        try:
            lights = self._bridge.get_all_lights()
        except FetchError as exc:
            raise FatalInitError(f"Could not list lights: {exc}") from exc

        written = 0
        for light in lights:
            new_state = transform(light.state)
            try:
                self._bridge.set_light_state(light.id, new_state)
            except FetchError as exc:
                logger.warning("light_write_failed %s", {"light": light.id, "error": str(exc)})
                continue
            written += 1
        logger.info("lights_updated %s", {"transform": transform.__name__, "lights": written})
        return written

    def shutdown(self) -> None:
        self._stop_event.set()

    def _run_wind_down(self) -> None:
        self.apply_now(wind_down_start)
        self._sleep(WIND_DOWN_DIM_AFTER_SECONDS)
        if self._stop_event.is_set():
            return
        self.apply_now(wind_down_dim)
        self._sleep(WIND_DOWN_OFF_AFTER_SECONDS)
        if self._stop_event.is_set():
            return
        self.apply_now(power_off)

    def _submit(self, name: str, fn: Callable[..., object], *args: object) -> Future:
        future: Future = Future()
        future.add_done_callback(lambda done: self._report(name, done))

        def run() -> None:
            if not future.set_running_or_notify_cancel():
                return
            try:
                result = fn(*args)
            except Exception as exc:
                future.set_exception(exc)
            else:
                future.set_result(result)

        threading.Thread(target=run, name=f"lights-{name}", daemon=True).start()
        return future

    def _report(self, name: str, future: Future) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is None:
            return
        if isinstance(exc, FatalInitError):
            logger.error("light_task_fatal %s", {"task": name, "error": str(exc)})
            self._on_fatal(exc)
            return
        logger.error("light_task_failed %s", {"task": name, "error": repr(exc)})


__all__ = [
    "BRIGHTNESS_STEP",
    "ORANGE_XY",
    "STANDARD_XY",
    "WHITE_XY",
    "LightController",
    "brighten",
    "dim",
    "power_off",
    "standard_color",
    "standard_on",
    "toggle",
    "white",
    "wind_down_dim",
    "wind_down_start",
]
