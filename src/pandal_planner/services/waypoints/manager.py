"""Ordered collection of the waypoints selected for route planning."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterator, Optional

from ...models.domain import Waypoint
from ..routing.errors import IndexOutOfRange, StalePlan
from ..routing.models import RoutePlan

logger = logging.getLogger(__name__)


class WaypointSetManager:
    """Keeps waypoints in insertion order with dense indices ``0..N-1``.

    The set owns its waypoints: ``add`` stores a copy and every accessor hands
    out copies, so callers never observe index changes after the fact.

    Every mutation discards the stored route plan and bumps ``generation``,
    since plan tours refer to the indices that were current when the plan was
    computed.
    """

    def __init__(self) -> None:
        self._waypoints: list[Waypoint] = []
        self._plan: Optional[RoutePlan] = None
        self._generation = 0

    def __len__(self) -> int:
        return len(self._waypoints)

    def __iter__(self) -> Iterator[Waypoint]:
        return iter(self.waypoints())

    def size(self) -> int:
        return len(self._waypoints)

    @property
    def generation(self) -> int:
        return self._generation

    def add(self, waypoint: Waypoint) -> Waypoint:
        stored = replace(waypoint, index=len(self._waypoints))
        self._waypoints.append(stored)
        self._invalidate()
        logger.debug(f"Added waypoint '{stored.name}' at index {stored.index}")
        return replace(stored)

    def remove(self, index: int) -> Waypoint:
        if not 0 <= index < len(self._waypoints):
            raise IndexOutOfRange(index, len(self._waypoints))
        removed = self._waypoints.pop(index)
        for waypoint in self._waypoints[index:]:
            waypoint.index -= 1
        self._invalidate()
        logger.debug(f"Removed waypoint '{removed.name}' from index {index}")
        return removed

    def clear(self) -> None:
        self._waypoints.clear()
        self._invalidate()

    def get(self, index: int) -> Waypoint:
        if not 0 <= index < len(self._waypoints):
            raise IndexOutOfRange(index, len(self._waypoints))
        return replace(self._waypoints[index])

    def waypoints(self) -> list[Waypoint]:
        return [replace(waypoint) for waypoint in self._waypoints]

    def coordinates(self) -> list[tuple[float, float]]:
        """Return ``(lat, lon)`` pairs in index order."""
        return [waypoint.coordinates for waypoint in self._waypoints]

    @property
    def plan(self) -> Optional[RoutePlan]:
        return self._plan

    def store_plan(self, plan: RoutePlan, generation: int | None = None) -> None:
        """Keep ``plan`` for the current set.

        ``generation`` is the value of :attr:`generation` read before planning
        started; if the set has changed since, ``StalePlan`` is raised.
        """
        if generation is not None and generation != self._generation:
            raise StalePlan("The waypoint set changed while routes were being planned. Plan routes again.")
        if plan.waypoint_count != len(self._waypoints):
            raise ValueError(
                f"Route plan covers {plan.waypoint_count} waypoints but the set holds {len(self._waypoints)}."
            )
        self._plan = plan

    def _invalidate(self) -> None:
        self._plan = None
        self._generation += 1
