"""Typed failures raised by waypoint management and route planning."""

from __future__ import annotations


class RoutePlannerError(Exception):
    """Base class for planner failures the caller is expected to render."""


class IndexOutOfRange(RoutePlannerError, IndexError):
    def __init__(self, index: int, size: int) -> None:
        super().__init__(f"Waypoint index {index} is out of range for a set of {size} waypoints.")
        self.index = index
        self.size = size


class InvalidMatrix(RoutePlannerError, ValueError):
    """Cost matrix is malformed, too small, or holds negative/non-finite values."""


class TooManyWaypoints(RoutePlannerError, ValueError):
    def __init__(self, count: int, limit: int) -> None:
        super().__init__(
            f"Exact route planning supports at most {limit} waypoints, got {count}. "
            "Remove some waypoints and try again."
        )
        self.count = count
        self.limit = limit


class UpstreamServiceFailure(RoutePlannerError, ConnectionError):
    """The routing service did not return a complete cost matrix."""


class Cancelled(RoutePlannerError):
    """Route search was cancelled before it completed."""


class StalePlan(RoutePlannerError):
    """The waypoint set changed while its route plan was being computed."""
