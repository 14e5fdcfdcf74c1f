"""Endpoints for the selected waypoint set and its route plan."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from ...schemas.routing import RoutePlanResponse, WaypointCreate, WaypointListResponse, WaypointModel
from ...services.outputs.formatter import route_plan_to_json
from ...services.routing.errors import RoutePlannerError
from ...services.routing.service import plan_waypoint_set
from ...services.waypoints.manager import WaypointSetManager
from ..errors import to_http_exception

router = APIRouter(prefix="/waypoints", tags=["waypoints"])

logger = logging.getLogger(__name__)


def get_waypoint_set(request: Request) -> WaypointSetManager:
    return request.app.state.waypoint_set


def _listing(manager: WaypointSetManager) -> WaypointListResponse:
    return WaypointListResponse(
        count=manager.size(),
        waypoints=[WaypointModel.from_domain(waypoint) for waypoint in manager],
    )


@router.get("", response_model=WaypointListResponse)
def list_waypoints(manager: WaypointSetManager = Depends(get_waypoint_set)) -> WaypointListResponse:
    return _listing(manager)


@router.post("", response_model=WaypointModel, status_code=status.HTTP_201_CREATED)
def add_waypoint(
    payload: WaypointCreate,
    manager: WaypointSetManager = Depends(get_waypoint_set),
) -> WaypointModel:
    waypoint = manager.add(payload.to_domain())
    return WaypointModel.from_domain(waypoint)


@router.delete("/{index}", response_model=WaypointListResponse)
def remove_waypoint(index: int, manager: WaypointSetManager = Depends(get_waypoint_set)) -> WaypointListResponse:
    """Remove one waypoint; later waypoints move up one index."""
    try:
        manager.remove(index)
    except RoutePlannerError as exc:
        raise to_http_exception(exc) from exc
    return _listing(manager)


@router.delete("", response_model=WaypointListResponse)
def clear_waypoints(manager: WaypointSetManager = Depends(get_waypoint_set)) -> WaypointListResponse:
    manager.clear()
    return _listing(manager)


@router.post("/plan", response_model=RoutePlanResponse)
def plan(manager: WaypointSetManager = Depends(get_waypoint_set)) -> dict:
    try:
        result = plan_waypoint_set(manager)
        return route_plan_to_json(result, manager.waypoints())
    except RoutePlannerError as exc:
        raise to_http_exception(exc) from exc
    except Exception as exc:
        logger.exception(f"Error planning routes for waypoint set: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to plan routes: {str(exc)}",
        ) from exc


@router.get("/plan", response_model=RoutePlanResponse)
def latest_plan(manager: WaypointSetManager = Depends(get_waypoint_set)) -> dict:
    """Return the last computed plan, if the waypoint set has not changed since."""
    if manager.plan is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No route plan for the current waypoints. Plan routes first.",
        )
    return route_plan_to_json(manager.plan, manager.waypoints())
