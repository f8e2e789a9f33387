from __future__ import annotations

from typing import Optional, Sequence

from ...core.exceptions import ValidationError
from ...locations.model import GeoPoint, OfficeLocation
from ...locations.service import match_offices
from .base import CheckInStrategy


class OfficeCheckInStrategy(CheckInStrategy):
    """Work from office: the point must fall inside a configured office."""

    def on_check_in(self, *, point: Optional[GeoPoint], offices: Sequence[OfficeLocation]) -> dict:
        if point is None:
            raise ValidationError("Location is required to check in from the office")

        snapshot = point.to_dict()
        if not offices:
            return snapshot

        match = match_offices(offices, point.latitude, point.longitude)
        if not match.inside:
            raise ValidationError(
                f"You are outside the office zone. ({round(match.nearest_meters or 0)}m away). "
                "Please go to the office to check in."
            )

        snapshot["office_id"] = match.office.id
        snapshot["office_name"] = match.office.name
        return snapshot

    def on_check_out(self, *, point: Optional[GeoPoint], offices: Sequence[OfficeLocation]) -> dict:
        if not offices:
            return point.to_dict() if point else {}

        if point is None or not match_offices(offices, point.latitude, point.longitude).inside:
            raise ValidationError("You must be at the office location to check out.")
        return point.to_dict()
