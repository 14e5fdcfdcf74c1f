"""Route group exports."""

from . import health, routes, waypoints

__all__ = ["health", "routes", "waypoints"]
