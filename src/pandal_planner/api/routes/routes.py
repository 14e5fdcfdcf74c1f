"""Stateless route planning endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...schemas.routing import PlanRequest, RoutePlanResponse
from ...services.outputs.formatter import route_plan_to_json
from ...services.routing.errors import RoutePlannerError
from ...services.routing.service import plan_routes, plan_routes_with_provider
from ..errors import to_http_exception

router = APIRouter(prefix="/routes", tags=["routes"])

logger = logging.getLogger(__name__)


@router.post("/plan", response_model=RoutePlanResponse, status_code=status.HTTP_200_OK)
def plan(payload: PlanRequest) -> dict:
    """Plan the shortest and the fastest tour through the given waypoints."""
    waypoints = [item.to_domain() for item in payload.waypoints]
    for index, waypoint in enumerate(waypoints):
        waypoint.index = index
    try:
        if payload.distance_matrix is not None and payload.time_matrix is not None:
            result = plan_routes(waypoints, payload.distance_matrix, payload.time_matrix)
        else:
            result = plan_routes_with_provider(waypoints)
        return route_plan_to_json(result, waypoints)
    except RoutePlannerError as exc:
        raise to_http_exception(exc) from exc
    except Exception as exc:
        logger.exception(f"Error planning routes: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to plan routes: {str(exc)}",
        ) from exc
