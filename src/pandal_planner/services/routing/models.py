"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

CostMatrix = Sequence[Sequence[float]]


@dataclass(slots=True, frozen=True)
class OptimizationResult:
    tour: tuple[int, ...]
    total_cost: float


@dataclass(slots=True, frozen=True)
class RoutePlan:
    by_distance: OptimizationResult
    by_time: OptimizationResult
    waypoint_count: int
