"""Serializers for route plans."""

from __future__ import annotations

from typing import Sequence

from ...models.domain import Waypoint
from ..routing.models import OptimizationResult, RoutePlan


def format_distance(total_km: float) -> str:
    return f"{total_km:.2f} km"


def format_duration(total_min: float) -> str:
    return f"{total_min:.0f} mins"


def _stops(result: OptimizationResult, waypoints: Sequence[Waypoint]) -> list[dict]:
    return [
        {
            "sequence": position + 1,
            "index": index,
            "name": waypoints[index].name,
            "address": waypoints[index].address,
            "latitude": waypoints[index].latitude,
            "longitude": waypoints[index].longitude,
        }
        for position, index in enumerate(result.tour)
    ]


def optimization_result_to_json(
    result: OptimizationResult,
    waypoints: Sequence[Waypoint],
    *,
    unit: str,
    display: str,
) -> dict:
    return {
        "tour": list(result.tour),
        "total": result.total_cost,
        "unit": unit,
        "display": display,
        "stops": _stops(result, waypoints),
    }


def route_plan_to_json(plan: RoutePlan, waypoints: Sequence[Waypoint]) -> dict:
    if plan.waypoint_count != len(waypoints):
        raise ValueError(
            f"Route plan covers {plan.waypoint_count} waypoints but {len(waypoints)} were given."
        )
    return {
        "waypoint_count": plan.waypoint_count,
        "by_distance": optimization_result_to_json(
            plan.by_distance,
            waypoints,
            unit="km",
            display=format_distance(plan.by_distance.total_cost),
        ),
        "by_time": optimization_result_to_json(
            plan.by_time,
            waypoints,
            unit="min",
            display=format_duration(plan.by_time.total_cost),
        ),
    }
