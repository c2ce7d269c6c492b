from __future__ import annotations

import os
from pathlib import Path
import subprocess
import sys
import threading
import time
from typing import Any
from unittest.mock import Mock, patch

import pytest
import requests

from homeboard.errors import DecodeError, FatalInitError, NetworkError
from homeboard.lights.bridge import HueBridge, Light, LightState
from homeboard.lights.controller import (
    ORANGE_XY,
    STANDARD_XY,
    WHITE_XY,
    LightController,
    brighten,
    dim,
    standard_color,
    standard_on,
    toggle,
    white,
)


class FakeBridge:
    def __init__(self, states: dict[str, LightState]) -> None:
        self.states = dict(states)
        self.fail_list = False
        self.fail_writes: set[str] = set()
        self.writes: list[tuple[str, LightState]] = []

    def get_all_lights(self) -> list[Light]:
        if self.fail_list:
            raise NetworkError("bridge unreachable")
        return [Light(id=light_id, name=light_id, state=state) for light_id, state in self.states.items()]

    def set_light_state(self, light_id: str, state: LightState) -> None:
        if light_id in self.fail_writes:
            raise NetworkError("write rejected")
        self.writes.append((light_id, state))
        self.states[light_id] = state


def _state(on: bool = True, bri: int = 100, xy: tuple[float, float] = (0.3, 0.3)) -> LightState:
    return LightState(on=on, bri=bri, xy=xy)


def _bridge() -> FakeBridge:
    return FakeBridge({"1": _state(), "2": _state(on=False, bri=10)})


def _controller(bridge: FakeBridge, **kwargs: Any) -> LightController:
    kwargs.setdefault("on_fatal", lambda exc: None)
    return LightController(bridge, **kwargs)


def test_standard_on() -> None:
    assert standard_on(_state(on=False, bri=3)) == LightState(on=True, bri=254, xy=STANDARD_XY)


def test_color_transforms_leave_power_alone() -> None:
    assert standard_color(_state(on=False)) == _state(on=False, xy=STANDARD_XY)
    assert white(_state(on=False)) == _state(on=False, xy=WHITE_XY)


def test_toggle() -> None:
    assert toggle(_state(on=True)).on is False
    assert toggle(_state(on=False)).on is True


@pytest.mark.parametrize(("bri", "expected"), [(215, 254), (250, 254), (100, 140), (0, 40)])
def test_brighten_clamps_at_max(bri: int, expected: int) -> None:
    assert brighten(_state(bri=bri)).bri == expected


@pytest.mark.parametrize(("bri", "expected"), [(39, 0), (0, 0), (40, 0), (100, 60), (254, 214)])
def test_dim_clamps_at_zero(bri: int, expected: int) -> None:
    assert dim(_state(bri=bri)).bri == expected


def test_transforms_do_not_mutate_input() -> None:
    original = _state(bri=100)

    brighten(original)

    assert original.bri == 100


def test_apply_to_all_writes_every_light() -> None:
    bridge = _bridge()
    controller = _controller(bridge)

    written = controller.apply_to_all(toggle).result(timeout=2)
    controller.shutdown()

    assert written == 2
    assert bridge.states["1"].on is False
    assert bridge.states["2"].on is True


def test_write_failure_skips_only_that_light() -> None:
    bridge = _bridge()
    bridge.fail_writes.add("1")
    controller = _controller(bridge)

    written = controller.apply_now(white)

    assert written == 1
    assert bridge.states["1"].xy == (0.3, 0.3)
    assert bridge.states["2"].xy == WHITE_XY


def test_list_failure_is_fatal() -> None:
    bridge = _bridge()
    bridge.fail_list = True
    reported: list[FatalInitError] = []
    called = threading.Event()

    def on_fatal(exc: FatalInitError) -> None:
        reported.append(exc)
        called.set()

    controller = _controller(bridge, on_fatal=on_fatal)
    future = controller.apply_to_all(toggle)

    assert called.wait(timeout=2)
    assert isinstance(future.exception(timeout=2), FatalInitError)
    assert len(reported) == 1
    assert bridge.writes == []
    controller.shutdown()


def test_wind_down_stages() -> None:
    bridge = _bridge()
    snapshots: list[tuple[float, dict[str, LightState]]] = []

    def fake_sleep(seconds: float) -> None:
        snapshots.append((seconds, dict(bridge.states)))

    controller = _controller(bridge, sleep=fake_sleep)
    controller.wind_down().result(timeout=2)
    controller.shutdown()

    assert [seconds for seconds, _ in snapshots] == [60, 120]
    first = snapshots[0][1]
    assert all(state == LightState(on=True, bri=30, xy=ORANGE_XY) for state in first.values())
    second = snapshots[1][1]
    assert all(state.bri == 1 and state.on for state in second.values())
    assert all(state.on is False for state in bridge.states.values())


def test_wind_down_does_not_block_other_keys() -> None:
    bridge = _bridge()
    release = threading.Event()
    controller = _controller(bridge, sleep=lambda seconds: release.wait(2))

    wind_down = controller.wind_down()
    toggled = controller.apply_to_all(toggle)

    assert toggled.result(timeout=2) == 2
    assert not wind_down.done()
    release.set()
    wind_down.result(timeout=5)
    controller.shutdown()


def test_toggle_not_queued_behind_many_wind_downs() -> None:
    bridge = _bridge()
    release = threading.Event()
    controller = _controller(bridge, sleep=lambda seconds: release.wait(5))

    wind_downs = [controller.wind_down() for _ in range(12)]
    toggled = controller.apply_to_all(toggle)

    try:
        assert toggled.result(timeout=2) == 2
        assert not any(future.done() for future in wind_downs)
    finally:
        release.set()
    for future in wind_downs:
        future.result(timeout=5)


def test_shutdown_stops_wind_down_at_next_delay() -> None:
    bridge = _bridge()
    controller = _controller(bridge)

    future = controller.wind_down()
    deadline = time.time() + 2
    while time.time() < deadline and bridge.states["1"].bri != 30:
        time.sleep(0.01)
    controller.shutdown()

    future.result(timeout=2)
    assert all(state == LightState(on=True, bri=30, xy=ORANGE_XY) for state in bridge.states.values())


EXIT_DURING_WIND_DOWN = """
import time

from homeboard.lights.bridge import Light, LightState
from homeboard.lights.controller import LightController


class Bridge:
    def __init__(self):
        self.state = LightState(on=True, bri=100, xy=(0.3, 0.3))

    def get_all_lights(self):
        return [Light(id="1", name="Lamp", state=self.state)]

    def set_light_state(self, light_id, state):
        self.state = state


bridge = Bridge()
controller = LightController(bridge, on_fatal=print, sleep=time.sleep)
controller.wind_down()
deadline = time.time() + 5
while bridge.state.bri != 30 and time.time() < deadline:
    time.sleep(0.01)
controller.shutdown()
"""


def test_process_exits_promptly_during_wind_down() -> None:
    root = Path(__file__).resolve().parents[1]
    started = time.monotonic()

    completed = subprocess.run(
        [sys.executable, "-c", EXIT_DURING_WIND_DOWN],
        cwd=root,
        env={**os.environ, "PYTHONPATH": str(root)},
        timeout=30,
        capture_output=True,
    )

    assert completed.returncode == 0, completed.stderr
    assert time.monotonic() - started < 15


def _mock_response(status_code: int, json_data: Any = None) -> Mock:
    response = Mock()
    response.status_code = status_code
    if json_data is not None:
        response.json.return_value = json_data
    else:
        response.json.side_effect = ValueError("Invalid JSON")
    return response


def test_bridge_lists_lights() -> None:
    body = {
        "2": {"name": "Desk", "state": {"on": False, "bri": 12, "xy": [0.4, 0.4], "reachable": True}},
        "1": {"name": "Ceiling", "state": {"on": True, "bri": 254, "xy": [0.3, 0.3]}},
    }
    with patch("requests.request", return_value=_mock_response(200, body)) as mock_request:
        lights = HueBridge("10.0.0.2", "user").get_all_lights()

    assert [light.id for light in lights] == ["1", "2"]
    assert lights[1] == Light(id="2", name="Desk", state=LightState(on=False, bri=12, xy=(0.4, 0.4)))
    assert mock_request.call_args.args == ("GET", "http://10.0.0.2/api/user/lights")


def test_bridge_set_state_sends_writable_fields() -> None:
    with patch("requests.request", return_value=_mock_response(200, [{"success": {}}])) as mock_request:
        HueBridge("10.0.0.2", "user").set_light_state("3", LightState(on=True, bri=30, xy=ORANGE_XY))

    assert mock_request.call_args.args == ("PUT", "http://10.0.0.2/api/user/lights/3/state")
    assert mock_request.call_args.kwargs["json"] == {"on": True, "bri": 30, "xy": [0.58, 0.36]}


def test_bridge_error_payload_raises() -> None:
    body = [{"error": {"type": 1, "address": "/lights", "description": "unauthorized user"}}]
    with patch("requests.request", return_value=_mock_response(200, body)):
        with pytest.raises(NetworkError) as exc_info:
            HueBridge("10.0.0.2", "bad").get_all_lights()

    assert "unauthorized user" in str(exc_info.value)


def test_bridge_connection_error_raises() -> None:
    with patch("requests.request", side_effect=requests.exceptions.ConnectionError("boom")):
        with pytest.raises(NetworkError):
            HueBridge("10.0.0.2", "user").get_all_lights()


def test_bridge_invalid_json_raises() -> None:
    with patch("requests.request", return_value=_mock_response(200, None)):
        with pytest.raises(DecodeError):
            HueBridge("10.0.0.2", "user").get_all_lights()
