"""Transit route categories shown as schedule panels."""

from __future__ import annotations

from enum import Enum


class RouteCategory(Enum):
    """Route categories with their panel title and item colour."""

    RER = ("rer", "RER -> Paris", "red")
    BUS = ("bus", "Bus -> VDF", "yellow")

    def __init__(self, key: str, title: str, color: str) -> None:
        self.key = key
        self.title = title
        self.color = color


# Display order, left to right.
ROUTE_ORDER = (RouteCategory.RER, RouteCategory.BUS)


__all__ = ["RouteCategory", "ROUTE_ORDER"]
