"""Typed views of the transit and weather API payloads."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from homeboard.errors import DecodeError


def _mapping(value: Any, context: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise DecodeError(f"Expected an object for {context}, got {type(value).__name__}")
    return value


def _field(mapping: dict[str, Any], key: str, context: str) -> Any:
    if key not in mapping:
        raise DecodeError(f"Missing '{key}' in {context}")
    return mapping[key]


def _number(value: Any, context: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DecodeError(f"Expected a number for {context}, got {value!r}")
    return float(value)


@dataclass(frozen=True)
class Schedules:
    """Upcoming departure messages for one route."""

    messages: list[str]

    @classmethod
    def from_json(cls, payload: Any) -> "Schedules":
        response = _mapping(_field(_mapping(payload, "schedules"), "response", "schedules"), "response")
        entries = response.get("schedules") or []
        if not isinstance(entries, list):
            raise DecodeError("'schedules' must be a list")
        messages = []
        for entry in entries:
            entry = _mapping(entry, "schedule entry")
            messages.append(str(entry.get("message") or ""))
        return cls(messages=messages)


@dataclass(frozen=True)
class TrafficStatus:
    """Free-text status message for a transit line."""

    message: str

    @classmethod
    def from_json(cls, payload: Any) -> "TrafficStatus":
        response = _mapping(_field(_mapping(payload, "traffic"), "response", "traffic"), "response")
        return cls(message=str(response.get("message", "")))


@dataclass(frozen=True)
class ForecastPoint:
    """One 3-hourly forecast point."""

    timestamp: int
    temperature: float
    cloud_cover: float
    rain_3h: float
    wind_speed: float

    @classmethod
    def from_json(cls, payload: Any) -> "ForecastPoint":
        item = _mapping(payload, "forecast point")
        main = _mapping(_field(item, "main", "forecast point"), "main")
        clouds = _mapping(item.get("clouds") or {}, "clouds")
        rain = _mapping(item.get("rain") or {}, "rain")
        wind = _mapping(item.get("wind") or {}, "wind")
        return cls(
            timestamp=int(_number(_field(item, "dt", "forecast point"), "dt")),
            temperature=_number(_field(main, "temp", "main"), "main.temp"),
            cloud_cover=_number(clouds.get("all", 0), "clouds.all"),
            rain_3h=_number(rain.get("3h", 0.0), "rain.3h"),
            wind_speed=_number(wind.get("speed", 0.0), "wind.speed"),
        )


@dataclass(frozen=True)
class Forecast:
    """Chronological list of forecast points."""

    points: list[ForecastPoint]

    @classmethod
    def from_json(cls, payload: Any) -> "Forecast":
        items = _field(_mapping(payload, "forecast"), "list", "forecast")
        if not isinstance(items, list):
            raise DecodeError("'list' must be a list")
        return cls(points=[ForecastPoint.from_json(item) for item in items])


@dataclass(frozen=True)
class SunTimes:
    """Sunrise and sunset of the current day, as unix timestamps."""

    sunrise: int
    sunset: int

    @classmethod
    def from_json(cls, payload: Any) -> "SunTimes":
        sys_block = _mapping(_field(_mapping(payload, "weather"), "sys", "weather"), "sys")
        return cls(
            sunrise=int(_number(_field(sys_block, "sunrise", "sys"), "sys.sunrise")),
            sunset=int(_number(_field(sys_block, "sunset", "sys"), "sys.sunset")),
        )


__all__ = ["Schedules", "TrafficStatus", "ForecastPoint", "Forecast", "SunTimes"]
