"""Compose rich renderables from the dashboard widget state."""

from __future__ import annotations

from rich.console import RenderableType
from rich.layout import Layout
from rich.padding import Padding
from rich.panel import Panel
from rich.text import Text

from homeboard.data.routes import RouteCategory
from homeboard.logic.layout import ScreenGeometry
from homeboard.rendering.widgets import (
    ACCENT_COLOR,
    BarChartWidget,
    DashboardState,
    ListWidget,
    TextWidget,
)

BAR_CHAR = "█"
VALUE_COLOR = "white"
FOOTER_ROWS = 3  # values, hours, days


def _panel(body: RenderableType, title: str) -> Panel:
    return Panel(
        body,
        title=Text(title, style=ACCENT_COLOR) if title else None,
        title_align="left",
        border_style="white",
        padding=0,
    )


def render_list(widget: ListWidget) -> RenderableType:
    body = Padding(
        Text("\n".join(widget.items), style=widget.color, no_wrap=not widget.border),
        (widget.padding_top, 0, 0, widget.padding_left),
    )
    if not widget.border:
        return body
    return _panel(body, widget.title)


def render_text(widget: TextWidget) -> RenderableType:
    body = Padding(
        Text(widget.text, style=widget.color),
        (widget.padding_top, 0, 0, widget.padding_left),
    )
    return _panel(body, widget.title)


def _cell(text: str, width: int) -> str:
    return text[:width].center(width)


def bar_chart_lines(widget: BarChartWidget) -> list[str]:
    """Plain-text rows of a bar chart sized to the widget's inner area.

    Bars sit above three footer rows: the value of each bar, the hour part
    of its label and, where a new day starts, the day part of its label.
    """
    width, height = widget.width, widget.height
    if width <= 0 or height <= 0:
        return []
    slot = widget.bar_width + widget.bar_gap
    visible = min(len(widget.data), (width + widget.bar_gap) // slot)
    data = widget.data[:visible]
    labels = widget.labels[:visible]
    gap = " " * widget.bar_gap

    footer_rows = min(FOOTER_ROWS, height)
    bar_rows = height - footer_rows
    top = max(data + [1])
    heights = [round(max(value, 0) / top * bar_rows) for value in data]

    lines = []
    for row in range(bar_rows):
        level = bar_rows - row
        lines.append(
            gap.join(
                (BAR_CHAR if bar_height >= level else " ") * widget.bar_width
                for bar_height in heights
            )
        )

    footer = [
        gap.join(_cell(str(value), widget.bar_width) for value in data),
        gap.join(_cell(label.rsplit(" ", 1)[-1], widget.bar_width) for label in labels),
        _day_row(labels, slot, visible * slot),
    ]
    lines.extend(footer[:footer_rows])
    return [line[:width] for line in lines]


def _day_row(labels: list[str], slot: int, width: int) -> str:
    row = [" "] * width
    days = [label.rsplit(" ", 1)[0] if " " in label else "" for label in labels]
    starts = [i for i, day in enumerate(days) if i == 0 or day != days[i - 1]]
    for position, start in enumerate(starts):
        end = starts[position + 1] if position + 1 < len(starts) else len(days)
        room = (end - start) * slot - 1
        for offset, char in enumerate(days[start][:room]):
            row[start * slot + offset] = char
    return "".join(row).rstrip()


def render_bar_chart(widget: BarChartWidget) -> RenderableType:
    lines = bar_chart_lines(widget)
    bar_rows = max(0, len(lines) - FOOTER_ROWS)
    text = Text(no_wrap=True)
    for index, line in enumerate(lines):
        if index:
            text.append("\n")
        text.append(line, style=VALUE_COLOR if index == bar_rows else widget.color)
    return _panel(text, widget.title)


def compose_screen(state: DashboardState, geometry: ScreenGeometry) -> Layout:
    """Build the full-screen layout from the current state."""
    root = Layout(name="root")
    root.split_row(
        Layout(name="left", size=geometry.left_width),
        Layout(name="right"),
    )

    root["left"].split_column(
        Layout(render_list(state.clock), name="clock", ratio=1),
        Layout(render_list(state.today), name="today", size=geometry.today_height),
        Layout(render_text(state.traffic), name="traffic", size=geometry.traffic_height),
        Layout(name="schedules", size=geometry.schedules_height),
    )
    root["schedules"].split_row(
        Layout(
            render_list(state.schedules[RouteCategory.RER]),
            name="schedule_rer",
            size=geometry.schedule_width,
        ),
        Layout(render_list(state.schedules[RouteCategory.BUS]), name="schedule_bus", ratio=1),
    )

    root["right"].split_column(
        Layout(render_bar_chart(state.temperature), name="temperature", size=geometry.temperature_height),
        Layout(render_bar_chart(state.cloud), name="cloud", size=geometry.chart_height),
        Layout(render_bar_chart(state.wind), name="wind", size=geometry.chart_height),
        Layout(render_bar_chart(state.rain), name="rain", ratio=1),
    )
    return root


__all__ = ["bar_chart_lines", "compose_screen", "render_bar_chart", "render_list", "render_text"]
