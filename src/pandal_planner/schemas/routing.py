"""Waypoint and route planning request/response schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from ..models.domain import Waypoint


class WaypointCreate(BaseModel):
    name: str = Field(..., min_length=1, description="Display name of the selected place.")
    address: str = Field(default="", description="Formatted address of the place.")
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)

    def to_domain(self) -> Waypoint:
        return Waypoint(
            name=self.name,
            address=self.address,
            latitude=self.latitude,
            longitude=self.longitude,
        )


class WaypointModel(WaypointCreate):
    index: int

    @classmethod
    def from_domain(cls, waypoint: Waypoint) -> "WaypointModel":
        return cls(
            name=waypoint.name,
            address=waypoint.address,
            latitude=waypoint.latitude,
            longitude=waypoint.longitude,
            index=waypoint.index,
        )


class WaypointListResponse(BaseModel):
    count: int
    waypoints: List[WaypointModel]


class PlanRequest(BaseModel):
    waypoints: List[WaypointCreate] = Field(..., description="Waypoints in visiting-origin order; the first is the origin.")
    distance_matrix: Optional[List[List[float]]] = Field(
        default=None,
        description="Pairwise distances in kilometres. When omitted, the configured routing provider is used.",
    )
    time_matrix: Optional[List[List[float]]] = Field(
        default=None,
        description="Pairwise travel times in minutes. Must be given together with distance_matrix.",
    )

    @model_validator(mode="after")
    def _matrices_together(self) -> "PlanRequest":
        if (self.distance_matrix is None) != (self.time_matrix is None):
            raise ValueError("distance_matrix and time_matrix must be provided together.")
        return self


class RouteStopModel(BaseModel):
    sequence: int
    index: int
    name: str
    address: str
    latitude: float
    longitude: float


class OptimizationResultModel(BaseModel):
    tour: List[int]
    total: float
    unit: str
    display: str
    stops: List[RouteStopModel]


class RoutePlanResponse(BaseModel):
    waypoint_count: int
    by_distance: OptimizationResultModel
    by_time: OptimizationResultModel
