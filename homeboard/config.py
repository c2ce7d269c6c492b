"""Configuration loader for the homeboard dashboard."""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from dotenv import load_dotenv
import yaml

from homeboard.data.routes import RouteCategory


@dataclass(frozen=True)
class TransitConfig:
    """Transit API endpoints."""

    schedule_urls: dict[RouteCategory, str]
    traffic_url: str


@dataclass(frozen=True)
class WeatherConfig:
    """Weather API endpoints."""

    forecast_url: str
    today_url: str


@dataclass(frozen=True)
class RefreshConfig:
    """Periodic refresh intervals, in seconds."""

    clock_seconds: float
    schedules_seconds: float
    weather_seconds: float
    initial_delay_seconds: float = 1.0


@dataclass(frozen=True)
class HueConfig:
    """Lighting bridge address and credential."""

    ip: str
    username: str


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str
    log_dir: str


@dataclass(frozen=True)
class AppConfig:
    """Top-level application configuration."""

    transit: TransitConfig
    weather: WeatherConfig
    refresh: RefreshConfig
    hue: HueConfig | None
    log: LoggingConfig


def _require_key(mapping: dict[str, Any], key: str, context: str) -> Any:
    if key not in mapping:
        raise ValueError(f"Missing required key '{key}' in {context} config")
    return mapping[key]


def _require_section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = _require_key(data, name, name)
    if not isinstance(section, dict):
        raise ValueError(f"'{name}' config must be a mapping")
    return section


def _with_api_key(url: str, api_key: str) -> str:
    """Append ``appid`` to a weather URL unless it already carries one."""
    if not api_key:
        return url
    parts = urlsplit(url)
    query = parse_qsl(parts.query, keep_blank_values=True)
    if any(name == "appid" for name, _ in query):
        return url
    query.append(("appid", api_key))
    return urlunsplit(parts._replace(query=urlencode(query)))


def load_config(path: str = "config/config.yaml") -> AppConfig:
    """Load application configuration from a YAML file."""
    load_dotenv()
    hue_username = os.environ.get("HUE_USERNAME", "")
    weather_api_key = os.environ.get("OPENWEATHER_API_KEY", "")
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except FileNotFoundError as exc:
        raise ValueError(f"Config file not found: {path}") from exc
    except yaml.YAMLError as exc:
        raise ValueError(f"Config file is not valid YAML: {path}") from exc

    if not isinstance(data, dict):
        raise ValueError("Config file must contain a mapping at the top level")

    transit_section = _require_section(data, "transit")
    weather_section = _require_section(data, "weather")
    refresh_section = _require_section(data, "refresh")
    logging_section = _require_section(data, "logging")

    transit = TransitConfig(
        schedule_urls={
            RouteCategory.RER: _require_key(transit_section, "rer_schedules_url", "transit"),
            RouteCategory.BUS: _require_key(transit_section, "bus_schedules_url", "transit"),
        },
        traffic_url=_require_key(transit_section, "traffic_url", "transit"),
    )

    weather = WeatherConfig(
        forecast_url=_with_api_key(
            _require_key(weather_section, "forecast_url", "weather"), weather_api_key
        ),
        today_url=_with_api_key(
            _require_key(weather_section, "today_url", "weather"), weather_api_key
        ),
    )

    refresh = RefreshConfig(
        clock_seconds=_require_key(refresh_section, "clock_seconds", "refresh"),
        schedules_seconds=_require_key(refresh_section, "schedules_seconds", "refresh"),
        weather_seconds=_require_key(refresh_section, "weather_seconds", "refresh"),
        initial_delay_seconds=refresh_section.get("initial_delay_seconds", 1.0),
    )

    hue = None
    hue_section = data.get("hue")
    if hue_section is not None:
        if not isinstance(hue_section, dict):
            raise ValueError("'hue' config must be a mapping")
        hue = HueConfig(
            ip=_require_key(hue_section, "ip", "hue"),
            username=hue_username or hue_section.get("username", ""),
        )

    log = LoggingConfig(
        level=_require_key(logging_section, "level", "logging"),
        log_dir=_require_key(logging_section, "log_dir", "logging"),
    )

    return AppConfig(transit=transit, weather=weather, refresh=refresh, hue=hue, log=log)
