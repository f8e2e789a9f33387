from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Optional, Sequence

from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_OFFICE_RADIUS_METERS
from ..core.exceptions import NotFoundError, ValidationError
from .model import GeoMatch, OfficeLocation
from .repository import LocationRepository

logger = logging.getLogger(__name__)


def _coordinate(value: Any, field_name: str, bound: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not -bound <= number <= bound:
        raise ValidationError(f"{field_name} must be between {-bound:g} and {bound:g}")
    return number


def match_offices(offices: Sequence[OfficeLocation], latitude: float, longitude: float) -> GeoMatch:
    """First office containing the point, plus the distance to the nearest one."""

    nearest: Optional[float] = None
    for office in offices:
        distance = office.distance_to(latitude, longitude)
        if distance <= office.radius:
            return GeoMatch(office=office, nearest_meters=distance)
        if nearest is None or distance < nearest:
            nearest = distance
    return GeoMatch(office=None, nearest_meters=nearest)


class LocationService:
    def __init__(self, locations: LocationRepository):
        self._locations = locations

    def list_locations(self) -> Sequence[OfficeLocation]:
        return self._locations.list_all()

    def _parse(self, body: dict[str, Any], location_id: Optional[int] = None) -> OfficeLocation:
        name = require_non_empty(body.get("name"), "Name")
        latitude = _coordinate(body.get("latitude"), "Latitude", 90)
        longitude = _coordinate(body.get("longitude"), "Longitude", 180)

        raw_radius = body.get("radius")
        try:
            radius = int(raw_radius) if raw_radius not in (None, "") else DEFAULT_OFFICE_RADIUS_METERS
        except (TypeError, ValueError):
            raise ValidationError("Radius must be a number")
        if radius <= 0:
            raise ValidationError("Radius must be greater than 0")

        return OfficeLocation(id=location_id, name=name, latitude=latitude, longitude=longitude, radius=radius)

    def create_location(self, body: dict[str, Any]) -> OfficeLocation:
        location = self._parse(body)
        new_id = self._locations.create(location)
        logger.info("Created office location %s (%s)", new_id, location.name)
        return replace(location, id=new_id)

    def update_location(self, location_id: int, body: dict[str, Any]) -> OfficeLocation:
        location = self._parse(body, location_id)
        if not self._locations.update(location):
            raise NotFoundError("Location not found")
        return location

    def delete_location(self, location_id: int) -> None:
        if not self._locations.delete_by_id(location_id):
            raise NotFoundError("Location not found")
        logger.info("Deleted office location %s", location_id)
