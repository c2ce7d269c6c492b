"""Forecast and day-info transforms feeding the weather widgets."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo

from homeboard.data.models import ForecastPoint, SunTimes

TODAY = "today"
TOMORROW = "tomorrow"
DAY_AFTER = "day after"
OTHER = "other"

SUN_TIME_FORMAT = "%Hh%M"
HOUR_LABEL_FORMAT = "%Hh"


@dataclass(frozen=True)
class ForecastSeries:
    """Index-aligned chart series and their labels."""

    temperature: list[int] = field(default_factory=list)
    cloud: list[int] = field(default_factory=list)
    rain: list[int] = field(default_factory=list)
    wind: list[int] = field(default_factory=list)
    labels: list[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.labels)


def day_prefix(day: date, today: date) -> str:
    """Bucket a calendar day relative to today."""
    offset = (day - today).days
    if offset == 0:
        return TODAY
    if offset == 1:
        return TOMORROW
    if offset == 2:
        return DAY_AFTER
    return OTHER


def forecast_label(moment: datetime, today: date) -> str:
    return f"{day_prefix(moment.date(), today)} {moment.strftime(HOUR_LABEL_FORMAT)}"


def rain_value(rain_3h: float) -> int:
    """Rain over 3 hours in tenths of a millimetre."""
    return round(rain_3h * 10)


def build_series(
    points: list[ForecastPoint],
    today: date,
    max_bars: int | None = None,
    tz: tzinfo | None = None,
) -> ForecastSeries:
    """Turn forecast points into chart series, keeping at most ``max_bars`` points."""
    if max_bars is not None:
        points = points[:max_bars]
    series = ForecastSeries()
    for point in points:
        moment = datetime.fromtimestamp(point.timestamp, tz)
        series.temperature.append(int(point.temperature))
        series.cloud.append(int(point.cloud_cover))
        series.rain.append(rain_value(point.rain_3h))
        series.wind.append(int(point.wind_speed))
        series.labels.append(forecast_label(moment, today))
    return series


def format_date(moment: datetime) -> str:
    """Full weekday, day, month name and year, e.g. ``Monday 19 October 2026``."""
    return f"{moment.strftime('%A')} {moment.day} {moment.strftime('%B %Y')}"


def format_day_info(now: datetime, sun: SunTimes, tz: tzinfo | None = None) -> list[str]:
    sunrise = datetime.fromtimestamp(sun.sunrise, tz)
    sunset = datetime.fromtimestamp(sun.sunset, tz)
    return [
        format_date(now),
        f"Sunrise: {sunrise.strftime(SUN_TIME_FORMAT)}",
        f"Sunset: {sunset.strftime(SUN_TIME_FORMAT)}",
    ]


__all__ = [
    "TODAY",
    "TOMORROW",
    "DAY_AFTER",
    "OTHER",
    "ForecastSeries",
    "build_series",
    "day_prefix",
    "forecast_label",
    "format_date",
    "format_day_info",
    "rain_value",
]
