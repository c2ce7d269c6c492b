"""Widget state for the dashboard panels."""

from __future__ import annotations

from dataclasses import dataclass, field

from homeboard.data.routes import ROUTE_ORDER, RouteCategory

ACCENT_COLOR = "cyan"


@dataclass
class ListWidget:
    """Bordered (or bare) list of text lines."""

    title: str
    color: str
    border: bool = True
    items: list[str] = field(default_factory=list)
    width: int = 0  # inner content width
    height: int = 0  # inner content height
    padding_top: int = 0
    padding_left: int = 0


@dataclass
class TextWidget:
    """Bordered single paragraph of text."""

    title: str
    color: str
    text: str = ""
    width: int = 0
    height: int = 0
    padding_top: int = 0
    padding_left: int = 0


@dataclass
class BarChartWidget:
    """Vertical bar chart; ``data`` and ``labels`` are index-aligned."""

    title: str
    color: str
    data: list[int] = field(default_factory=list)
    labels: list[str] = field(default_factory=list)
    width: int = 0
    height: int = 0
    bar_width: int = 3
    bar_gap: int = 1


@dataclass
class DashboardState:
    """Everything the screen shows; each refresh task owns a disjoint subset."""

    term_width: int
    term_height: int
    clock: ListWidget = field(default_factory=lambda: ListWidget("", "white", border=False))
    today: ListWidget = field(default_factory=lambda: ListWidget("Today", "green"))
    traffic: TextWidget = field(default_factory=lambda: TextWidget("RER traffic", "red"))
    schedules: dict[RouteCategory, ListWidget] = field(
        default_factory=lambda: {
            category: ListWidget(category.title, category.color) for category in ROUTE_ORDER
        }
    )
    temperature: BarChartWidget = field(
        default_factory=lambda: BarChartWidget("Temperature (°C)", "red")
    )
    cloud: BarChartWidget = field(default_factory=lambda: BarChartWidget("Cloud cover (%)", "yellow"))
    wind: BarChartWidget = field(default_factory=lambda: BarChartWidget("Wind (m/s)", "cyan"))
    rain: BarChartWidget = field(default_factory=lambda: BarChartWidget("Rain (mm x10)", "blue"))

    @property
    def charts(self) -> list[BarChartWidget]:
        """Charts in top-to-bottom screen order."""
        return [self.temperature, self.cloud, self.wind, self.rain]


__all__ = ["ACCENT_COLOR", "ListWidget", "TextWidget", "BarChartWidget", "DashboardState"]
