"""Route planning orchestration: one exact optimization per metric."""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Sequence

from ...config import settings
from ...models.domain import Waypoint
from ..waypoints.manager import WaypointSetManager
from .errors import Cancelled, InvalidMatrix, TooManyWaypoints
from .matrix import CostMatrixProvider, get_matrix_provider
from .models import CostMatrix, RoutePlan
from .solver import optimize, validate_matrix

logger = logging.getLogger(__name__)


def _check_waypoint_count(count: int) -> None:
    if count < 2:
        raise InvalidMatrix(f"At least 2 waypoints are required to plan a route, got {count}.")
    if count > settings.max_waypoints:
        raise TooManyWaypoints(count, settings.max_waypoints)


def _check_matrix(matrix: CostMatrix, count: int, label: str) -> None:
    size = validate_matrix(matrix)
    if size != count:
        raise InvalidMatrix(f"{label} matrix has {size} rows but {count} waypoints were given.")


def plan_routes(
    waypoints: Sequence[Waypoint],
    distance_matrix: CostMatrix,
    time_matrix: CostMatrix,
    *,
    time_limit_seconds: float | None = None,
) -> RoutePlan:
    """Find the shortest tour by distance and the fastest tour by time.

    Both matrices must follow the order of ``waypoints`` (kilometres and
    minutes). The two searches are independent and run in parallel; if they
    do not finish within the time limit both are cancelled.
    """
    count = len(waypoints)
    _check_waypoint_count(count)
    _check_matrix(distance_matrix, count, "Distance")
    _check_matrix(time_matrix, count, "Time")

    limit = time_limit_seconds if time_limit_seconds is not None else settings.solver_time_limit_seconds
    cancel_event = threading.Event()
    start_time = time.time()
    logger.info(f"Planning routes for {count} waypoints")

    with ThreadPoolExecutor(max_workers=2) as executor:
        by_distance = executor.submit(optimize, distance_matrix, 0, cancel_event)
        by_time = executor.submit(optimize, time_matrix, 0, cancel_event)
        _, pending = wait([by_distance, by_time], timeout=limit)
        if pending:
            cancel_event.set()
            logger.warning(f"Route planning for {count} waypoints exceeded {limit:.1f}s; cancelling")
            raise Cancelled(f"Route planning did not finish within {limit:.1f} seconds.")
        plan = RoutePlan(
            by_distance=by_distance.result(),
            by_time=by_time.result(),
            waypoint_count=count,
        )

    elapsed = time.time() - start_time
    logger.info(
        f"Planned routes for {count} waypoints in {elapsed:.3f}s: "
        f"{plan.by_distance.total_cost:.2f} km, {plan.by_time.total_cost:.1f} min"
    )
    return plan


def plan_routes_with_provider(
    waypoints: Sequence[Waypoint],
    provider: CostMatrixProvider | None = None,
) -> RoutePlan:
    """Fetch both cost matrices for ``waypoints`` and plan routes over them."""
    _check_waypoint_count(len(waypoints))
    provider = provider or get_matrix_provider()
    distance_matrix, time_matrix = provider.get_cost_matrices(waypoints)
    return plan_routes(waypoints, distance_matrix, time_matrix)


def plan_waypoint_set(
    manager: WaypointSetManager,
    provider: CostMatrixProvider | None = None,
) -> RoutePlan:
    """Plan the managed waypoint set and keep the result until the set changes.

    Raises ``StalePlan`` if the set is modified while the plan is computed.
    """
    generation = manager.generation
    plan = plan_routes_with_provider(manager.waypoints(), provider)
    manager.store_plan(plan, generation)
    return plan
