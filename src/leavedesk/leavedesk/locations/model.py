from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..common.geo import distance_meters
from ..core.constants import DEFAULT_OFFICE_RADIUS_METERS


@dataclass(frozen=True)
class OfficeLocation:
    """A geo-fence: a point and the radius (meters) around it."""

    id: Optional[int]
    name: str
    latitude: float
    longitude: float
    radius: int = DEFAULT_OFFICE_RADIUS_METERS

    def distance_to(self, latitude: float, longitude: float) -> float:
        return distance_meters(latitude, longitude, self.latitude, self.longitude)

    def contains(self, latitude: float, longitude: float) -> bool:
        return self.distance_to(latitude, longitude) <= self.radius

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "radius": self.radius,
        }


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float

    def to_dict(self) -> dict[str, Any]:
        return {"latitude": self.latitude, "longitude": self.longitude}


@dataclass(frozen=True)
class GeoMatch:
    """Result of matching a point against all offices."""

    office: Optional[OfficeLocation]
    nearest_meters: Optional[float]

    @property
    def inside(self) -> bool:
        return self.office is not None
