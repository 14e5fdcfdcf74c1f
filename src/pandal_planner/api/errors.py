"""Translation of planner failures into HTTP errors."""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from ..services.routing.errors import (
    Cancelled,
    IndexOutOfRange,
    InvalidMatrix,
    RoutePlannerError,
    StalePlan,
    TooManyWaypoints,
    UpstreamServiceFailure,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: tuple[tuple[type[RoutePlannerError], int], ...] = (
    (IndexOutOfRange, status.HTTP_404_NOT_FOUND),
    (InvalidMatrix, status.HTTP_400_BAD_REQUEST),
    (TooManyWaypoints, status.HTTP_400_BAD_REQUEST),
    (UpstreamServiceFailure, status.HTTP_502_BAD_GATEWAY),
    (Cancelled, status.HTTP_504_GATEWAY_TIMEOUT),
    (StalePlan, status.HTTP_409_CONFLICT),
)


def to_http_exception(exc: RoutePlannerError) -> HTTPException:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    logger.exception(f"Unhandled planner error: {exc}")
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
