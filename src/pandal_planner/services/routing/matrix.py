"""Cost matrix providers: where distance and time tables come from."""

from __future__ import annotations

import logging
from typing import Protocol, Sequence

from ...config import settings
from ...models.domain import Waypoint
from ..geospatial import haversine_matrix_km
from .errors import UpstreamServiceFailure
from .osrm_client import OSRMClient

logger = logging.getLogger(__name__)

METERS_PER_KM = 1000.0
SECONDS_PER_MINUTE = 60.0


class CostMatrixProvider(Protocol):
    def get_cost_matrices(self, waypoints: Sequence[Waypoint]) -> tuple[list[list[float]], list[list[float]]]:
        """Return ``(distance_km, time_min)`` matrices in waypoint order."""
        ...


def _convert(table: Sequence[Sequence[float | None]], size: int, divisor: float, label: str) -> list[list[float]]:
    if len(table) != size or any(len(row) != size for row in table):
        raise UpstreamServiceFailure(f"OSRM {label} table does not cover all {size} waypoints.")
    matrix = [[0.0] * size for _ in range(size)]
    missing = 0
    for i, row in enumerate(table):
        for j, value in enumerate(row):
            if i == j:
                continue
            if value is None:
                missing += 1
                continue
            matrix[i][j] = float(value) / divisor
    if missing:
        raise UpstreamServiceFailure(
            f"OSRM could not compute {missing} {label} value(s); some waypoints are unreachable."
        )
    return matrix


class OSRMMatrixProvider:
    """Road distances and travel times from an OSRM table service."""

    def __init__(self, client: OSRMClient | None = None) -> None:
        self.client = client or OSRMClient()

    def get_cost_matrices(self, waypoints: Sequence[Waypoint]) -> tuple[list[list[float]], list[list[float]]]:
        size = len(waypoints)
        logger.info(f"Requesting OSRM table for {size} waypoints ({self.client.profile})")
        data = self.client.table([waypoint.coordinates for waypoint in waypoints])
        distance_km = _convert(data["distances"], size, METERS_PER_KM, "distance")
        time_min = _convert(data["durations"], size, SECONDS_PER_MINUTE, "duration")
        return distance_km, time_min


class HaversineMatrixProvider:
    """Straight-line distances with travel time at a constant average speed."""

    def __init__(self, average_speed_kmh: float | None = None) -> None:
        self.average_speed_kmh = average_speed_kmh or settings.haversine_speed_kmh

    def get_cost_matrices(self, waypoints: Sequence[Waypoint]) -> tuple[list[list[float]], list[list[float]]]:
        distance_km = haversine_matrix_km([waypoint.coordinates for waypoint in waypoints])
        minutes_per_km = 60.0 / self.average_speed_kmh
        time_min = [[value * minutes_per_km for value in row] for row in distance_km]
        return distance_km, time_min


def get_matrix_provider() -> CostMatrixProvider:
    if settings.osrm_base_url:
        return OSRMMatrixProvider()
    logger.info("OSRM base URL not configured; estimating cost matrices with haversine distances")
    return HaversineMatrixProvider()
