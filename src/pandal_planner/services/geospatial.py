"""Geospatial helper functions."""

from __future__ import annotations

import math
from typing import Sequence

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def haversine_matrix_km(coordinates: Sequence[tuple[float, float]]) -> list[list[float]]:
    """Pairwise great-circle distances for ``(lat, lon)`` pairs, zero on the diagonal."""

    size = len(coordinates)
    matrix = [[0.0] * size for _ in range(size)]
    for i, (lat1, lon1) in enumerate(coordinates):
        for j in range(i + 1, size):
            lat2, lon2 = coordinates[j]
            distance = haversine_km(lat1, lon1, lat2, lon2)
            matrix[i][j] = distance
            matrix[j][i] = distance
    return matrix
