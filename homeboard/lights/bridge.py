"""Hue bridge REST client."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import requests

from homeboard.errors import DecodeError, NetworkError

MAX_BRIGHTNESS = 254
MIN_BRIGHTNESS = 0


@dataclass(frozen=True)
class LightState:
    """Writable part of a light's state."""

    on: bool
    bri: int
    xy: tuple[float, float]

    @classmethod
    def from_json(cls, payload: Any) -> "LightState":
        if not isinstance(payload, dict):
            raise DecodeError("Light state must be an object")
        xy = payload.get("xy") or (0.0, 0.0)
        try:
            return cls(
                on=bool(payload.get("on", False)),
                bri=int(payload.get("bri", 0)),
                xy=(float(xy[0]), float(xy[1])),
            )
        except (TypeError, ValueError, IndexError) as exc:
            raise DecodeError(f"Malformed light state: {payload!r}") from exc

    def to_json(self) -> dict[str, Any]:
        return {"on": self.on, "bri": self.bri, "xy": list(self.xy)}


@dataclass(frozen=True)
class Light:
    id: str
    name: str
    state: LightState


def _raise_for_bridge_errors(body: Any, context: str) -> None:
    # The bridge answers 200 with a list of {"error": {...}} entries on failure.
    if isinstance(body, list):
        errors = [item["error"] for item in body if isinstance(item, dict) and "error" in item]
        if errors:
            descriptions = ", ".join(str(error.get("description", error)) for error in errors)
            raise NetworkError(f"Bridge rejected {context}: {descriptions}")


class HueBridge:
    """Lists lights and writes light states; no connection is kept between calls."""

    def __init__(self, ip: str, username: str, timeout_seconds: float = 10) -> None:
        self._base_url = f"http://{ip}/api/{username}"
        self._timeout_seconds = timeout_seconds

    def get_all_lights(self) -> list[Light]:
        body = self._request("GET", "/lights", "light list")
        _raise_for_bridge_errors(body, "light list")
        if not isinstance(body, dict):
            raise DecodeError("Light list must be an object keyed by light id")
        lights = []
        for light_id, light in sorted(body.items()):
            if not isinstance(light, dict):
                raise DecodeError(f"Light {light_id} must be an object")
            lights.append(
                Light(
                    id=str(light_id),
                    name=str(light.get("name", light_id)),
                    state=LightState.from_json(light.get("state")),
                )
            )
        return lights

    def set_light_state(self, light_id: str, state: LightState) -> None:
        body = self._request(
            "PUT", f"/lights/{light_id}/state", f"state of light {light_id}", json=state.to_json()
        )
        _raise_for_bridge_errors(body, f"state of light {light_id}")

    def _request(self, method: str, path: str, context: str, **kwargs: Any) -> Any:
        url = f"{self._base_url}{path}"
        try:
            response = requests.request(method, url, timeout=self._timeout_seconds, **kwargs)
        except requests.RequestException as exc:
            raise NetworkError(f"Bridge request for {context} failed: {exc}") from exc

        if response.status_code != 200:
            raise NetworkError(f"Bridge request for {context} failed: Status {response.status_code}")

        try:
            return response.json()
        except ValueError as exc:
            raise DecodeError(f"Bridge response for {context} was not valid JSON") from exc


__all__ = ["MAX_BRIGHTNESS", "MIN_BRIGHTNESS", "HueBridge", "Light", "LightState"]
