from __future__ import annotations

from typing import Optional, Sequence

from ...locations.model import GeoPoint, OfficeLocation
from .base import CheckInStrategy


class RemoteCheckInStrategy(CheckInStrategy):
    """Remote work: location is recorded when available, never enforced."""

    def on_check_in(self, *, point: Optional[GeoPoint], offices: Sequence[OfficeLocation]) -> dict:
        return point.to_dict() if point else {}

    def on_check_out(self, *, point: Optional[GeoPoint], offices: Sequence[OfficeLocation]) -> dict:
        return point.to_dict() if point else {}
