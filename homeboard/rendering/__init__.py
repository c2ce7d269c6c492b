"""Widget state, composition and screen output for the terminal dashboard."""

from homeboard.rendering.widgets import BarChartWidget, DashboardState, ListWidget, TextWidget

__all__ = ["BarChartWidget", "DashboardState", "ListWidget", "TextWidget"]
