"""Fetch-and-render cycles run by the periodic tasks."""

from __future__ import annotations

from datetime import datetime
import logging
from typing import Callable

from homeboard.config import TransitConfig, WeatherConfig
from homeboard.data.http_client import JsonClient
from homeboard.data.models import Forecast, Schedules, SunTimes, TrafficStatus
from homeboard.data.routes import ROUTE_ORDER
from homeboard.errors import FetchError
from homeboard.logic.forecast import build_series, format_day_info
from homeboard.logic.layout import center_list, center_text, max_forecast_bars
from homeboard.rendering.clock import clock_rows
from homeboard.rendering.widgets import DashboardState

logger = logging.getLogger(__name__)


class Refresher:
    """Owns the three refresh cycles; each writes only its own widgets."""

    def __init__(
        self,
        state: DashboardState,
        client: JsonClient,
        transit: TransitConfig,
        weather: WeatherConfig,
        redraw: Callable[[DashboardState], None],
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._state = state
        self._client = client
        self._transit = transit
        self._weather = weather
        self._redraw = redraw
        self._now = now

    def update_clock(self) -> None:
        clock = self._state.clock
        clock.items = clock_rows(self._now())
        center_list(clock, vertically=True)
        self._redraw(self._state)

    def update_schedules_and_traffic(self) -> None:
        for category in ROUTE_ORDER:
            url = self._transit.schedule_urls[category]
            try:
                schedules = self._client.fetch(url, Schedules)
            except FetchError as exc:
                logger.warning("refresh_failed %s", {"widget": category.key, "error": str(exc)})
                continue
            widget = self._state.schedules[category]
            widget.items = schedules.messages
            center_list(widget)

        try:
            traffic = self._client.fetch(self._transit.traffic_url, TrafficStatus)
        except FetchError as exc:
            logger.warning("refresh_failed %s", {"widget": "traffic", "error": str(exc)})
        else:
            self._state.traffic.text = traffic.message
            center_text(self._state.traffic)

        self._redraw(self._state)

    def update_weather_and_today(self) -> None:
        now = self._now()
        state = self._state

        try:
            forecast = self._client.fetch(self._weather.forecast_url, Forecast)
        except FetchError as exc:
            logger.warning("refresh_failed %s", {"widget": "forecast", "error": str(exc)})
        else:
            series = build_series(
                forecast.points,
                now.date(),
                max_bars=max_forecast_bars(state.term_width),
                tz=now.tzinfo,
            )
            state.temperature.data = series.temperature
            state.cloud.data = series.cloud
            state.rain.data = series.rain
            state.wind.data = series.wind
            for chart in state.charts:
                chart.labels = list(series.labels)
            logger.info("forecast_updated %s", {"points": len(series)})

        try:
            sun = self._client.fetch(self._weather.today_url, SunTimes)
        except FetchError as exc:
            logger.warning("refresh_failed %s", {"widget": "today", "error": str(exc)})
        else:
            state.today.items = format_day_info(now, sun, tz=now.tzinfo)
            center_list(state.today)

        self._redraw(state)


__all__ = ["Refresher"]
