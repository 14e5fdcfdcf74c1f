"""Domain models for selected waypoints."""

from dataclasses import dataclass


@dataclass(slots=True)
class Waypoint:
    """A selected point of interest with its position in the active set."""

    name: str
    address: str
    latitude: float
    longitude: float
    index: int = -1

    @property
    def coordinates(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)
