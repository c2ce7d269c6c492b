from __future__ import annotations

from datetime import datetime
from typing import Any

from homeboard.config import TransitConfig, WeatherConfig
from homeboard.data.models import Forecast, ForecastPoint, Schedules, SunTimes, TrafficStatus
from homeboard.data.routes import RouteCategory
from homeboard.errors import DecodeError, NetworkError
from homeboard.logic.layout import apply_geometry, compute_geometry
from homeboard.refresh import Refresher
from homeboard.rendering.widgets import DashboardState

TRANSIT = TransitConfig(
    schedule_urls={RouteCategory.RER: "rer", RouteCategory.BUS: "bus"},
    traffic_url="traffic",
)
WEATHER = WeatherConfig(forecast_url="forecast", today_url="today")
NOW = datetime(2026, 10, 19, 14, 5, 9)


class FakeClient:
    def __init__(self, responses: dict[str, Any]) -> None:
        self.responses = responses

    def fetch(self, url: str, model: type) -> Any:
        response = self.responses[url]
        if isinstance(response, Exception):
            raise response
        return response


def _forecast(*temps: float) -> Forecast:
    start = int(datetime(2026, 10, 19, 15).timestamp())
    return Forecast(
        points=[
            ForecastPoint(
                timestamp=start + index * 3 * 3600,
                temperature=temp,
                cloud_cover=20.0 * index,
                rain_3h=0.25 * index,
                wind_speed=2.0,
            )
            for index, temp in enumerate(temps)
        ]
    )


def _refresher(responses: dict[str, Any]) -> tuple[Refresher, DashboardState, list[DashboardState]]:
    state = DashboardState(term_width=160, term_height=50)
    apply_geometry(state, compute_geometry(160, 50))
    redraws: list[DashboardState] = []
    refresher = Refresher(state, FakeClient(responses), TRANSIT, WEATHER, redraw=redraws.append, now=lambda: NOW)
    return refresher, state, redraws


def _chart_snapshot(state: DashboardState) -> list[tuple[list[int], list[str]]]:
    return [(list(chart.data), list(chart.labels)) for chart in state.charts]


def test_update_clock_centers_glyphs() -> None:
    refresher, state, redraws = _refresher({})

    refresher.update_clock()

    assert len(state.clock.items) > 1
    longest = max(len(row) for row in state.clock.items)
    assert state.clock.padding_left == (state.clock.width - longest) // 2
    assert state.clock.padding_top == (state.clock.height - len(state.clock.items)) // 2
    assert redraws == [state]


def test_update_schedules_and_traffic() -> None:
    refresher, state, redraws = _refresher(
        {
            "rer": Schedules(messages=["A quai", "12 mn"]),
            "bus": Schedules(messages=["3 mn"]),
            "traffic": TrafficStatus(message="Trafic normal"),
        }
    )

    refresher.update_schedules_and_traffic()

    assert state.schedules[RouteCategory.RER].items == ["A quai", "12 mn"]
    assert state.schedules[RouteCategory.BUS].items == ["3 mn"]
    assert state.schedules[RouteCategory.BUS].padding_left == (38 - 4) // 2
    assert state.traffic.text == "Trafic normal"
    assert state.traffic.padding_top == 1
    assert len(redraws) == 1


def test_failed_route_keeps_stale_items() -> None:
    refresher, state, redraws = _refresher(
        {
            "rer": NetworkError("down"),
            "bus": Schedules(messages=["3 mn"]),
            "traffic": DecodeError("bad body"),
        }
    )
    state.schedules[RouteCategory.RER].items = ["old"]
    state.traffic.text = "old traffic"

    refresher.update_schedules_and_traffic()

    assert state.schedules[RouteCategory.RER].items == ["old"]
    assert state.schedules[RouteCategory.BUS].items == ["3 mn"]
    assert state.traffic.text == "old traffic"
    assert len(redraws) == 1


def test_update_weather_and_today() -> None:
    sunrise = int(datetime(2026, 10, 19, 8, 21).timestamp())
    sunset = int(datetime(2026, 10, 19, 18, 47).timestamp())
    refresher, state, _ = _refresher(
        {"forecast": _forecast(11.8, 9.2, 7.0), "today": SunTimes(sunrise=sunrise, sunset=sunset)}
    )

    refresher.update_weather_and_today()

    assert state.temperature.data == [11, 9, 7]
    assert state.cloud.data == [0, 20, 40]
    assert state.rain.data == [0, 2, 5]
    assert state.wind.data == [2, 2, 2]
    assert state.rain.labels == ["today 15h", "today 18h", "today 21h"]
    assert all(len(chart.data) == len(chart.labels) for chart in state.charts)
    assert state.today.items == ["Monday 19 October 2026", "Sunrise: 08h21", "Sunset: 18h47"]


def test_forecast_capped_to_chart_width() -> None:
    refresher, state, _ = _refresher(
        {"forecast": _forecast(*([10.0] * 40)), "today": NetworkError("down")}
    )

    refresher.update_weather_and_today()

    assert len(state.temperature.data) == 18
    assert len(state.wind.labels) == 18


def test_weather_failure_keeps_charts_until_next_success() -> None:
    responses: dict[str, Any] = {"forecast": _forecast(10.0, 12.0), "today": NetworkError("down")}
    refresher, state, redraws = _refresher(responses)
    refresher.update_weather_and_today()
    before = _chart_snapshot(state)

    responses["forecast"] = NetworkError("timeout")
    refresher.update_weather_and_today()

    assert _chart_snapshot(state) == before
    assert len(redraws) == 2

    responses["forecast"] = _forecast(1.0, 2.0, 3.0)
    refresher.update_weather_and_today()

    assert state.temperature.data == [1, 2, 3]
    assert all(len(chart.labels) == 3 for chart in state.charts)
