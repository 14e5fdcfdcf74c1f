"""Exact closed-tour solver over a dense cost matrix."""

from __future__ import annotations

import math
import numbers
import threading
from typing import Sequence

from .errors import Cancelled, InvalidMatrix
from .models import CostMatrix, OptimizationResult


def validate_matrix(matrix: CostMatrix, origin: int = 0) -> int:
    """Check that ``matrix`` is a square, dense, non-negative cost table.

    Returns the matrix size. Raises ``InvalidMatrix`` on the first problem found.
    """
    try:
        size = len(matrix)
    except TypeError as exc:
        raise InvalidMatrix("Cost matrix must be a sequence of rows.") from exc
    if size < 2:
        raise InvalidMatrix(f"At least 2 locations are required for route optimization, got {size}.")
    if not 0 <= origin < size:
        raise InvalidMatrix(f"Origin index {origin} is outside the matrix (size {size}).")

    # A tour leaves every location exactly once, so no tour costs more than
    # the sum of the largest outgoing cost of each row.
    worst_tour_cost = 0.0
    for i, row in enumerate(matrix):
        try:
            row_length = len(row)
        except TypeError as exc:
            raise InvalidMatrix(f"Row {i} of the cost matrix is not a sequence.") from exc
        if row_length != size:
            raise InvalidMatrix(f"Cost matrix is not square: row {i} has {row_length} entries, expected {size}.")
        row_max = 0.0
        for j, value in enumerate(row):
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise InvalidMatrix(f"Cost matrix entry ({i}, {j}) is not a number: {value!r}.")
            if not math.isfinite(value):
                raise InvalidMatrix(f"Cost matrix entry ({i}, {j}) is not finite: {value!r}.")
            if value < 0:
                raise InvalidMatrix(f"Cost matrix entry ({i}, {j}) is negative: {value!r}.")
            if i != j:
                row_max = max(row_max, float(value))
        worst_tour_cost += row_max
    if not math.isfinite(worst_tour_cost):
        raise InvalidMatrix("Cost matrix values are too large: tour costs would overflow.")
    return size


def tour_cost(matrix: CostMatrix, tour: Sequence[int]) -> float:
    """Sum consecutive edge costs along ``tour`` from left to right."""

    total = 0.0
    for previous, current in zip(tour, tour[1:]):
        total += matrix[previous][current]
    return total


def optimize(
    matrix: CostMatrix,
    origin: int = 0,
    cancel_event: threading.Event | None = None,
) -> OptimizationResult:
    """Return the minimum-cost tour that visits every index once and returns to ``origin``.

    The search enumerates every ordering of the non-origin indices depth first,
    trying candidates in ascending index order. A tour only replaces the current
    best when it is strictly cheaper, so among equal-cost tours the first one
    enumerated is returned. Runtime grows as (N-1)!; callers are expected to
    bound N before calling.

    If ``cancel_event`` is set while the search runs, ``Cancelled`` is raised.
    """
    size = validate_matrix(matrix, origin)

    visited = [False] * size
    visited[origin] = True
    path = [origin]
    best_cost = math.inf
    best_tour: tuple[int, ...] = ()

    def search(cost: float) -> None:
        nonlocal best_cost, best_tour
        if cancel_event is not None and cancel_event.is_set():
            raise Cancelled("Route optimization was cancelled.")

        last = path[-1]
        if len(path) == size:
            total = cost + matrix[last][origin]
            if not best_tour or total < best_cost:
                best_cost = total
                best_tour = (*path, origin)
            return

        for candidate in range(size):
            if visited[candidate]:
                continue
            visited[candidate] = True
            path.append(candidate)
            search(cost + matrix[last][candidate])
            path.pop()
            visited[candidate] = False

    search(0.0)
    return OptimizationResult(tour=best_tour, total_cost=best_cost)
