"""FastAPI application entry point."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes import health, routes, waypoints
from .config import settings
from .services.waypoints.manager import WaypointSetManager

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(title=settings.app_name, root_path="")
    app.state.waypoint_set = WaypointSetManager()
    if settings.frontend_allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.frontend_allowed_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.get("/")
    def root():
        return {
            "service": settings.app_name,
            "status": "running",
            "api_prefix": settings.api_prefix,
            "health": f"{settings.api_prefix}/health",
            "docs": "/docs",
            "matrix_provider": "osrm" if settings.osrm_base_url else "haversine",
            "max_waypoints": settings.max_waypoints,
        }

    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(waypoints.router, prefix=settings.api_prefix)
    app.include_router(routes.router, prefix=settings.api_prefix)
    logger.info(f"{settings.app_name} ready (max {settings.max_waypoints} waypoints per plan)")
    return app


app = create_app()
