from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from ...locations.model import GeoPoint, OfficeLocation


class CheckInStrategy(ABC):
    """Strategy Pattern: how a check-in mode validates and records location.

    Each method returns the ``location_snapshot`` entry to store for the event,
    or raises ValidationError when the location is not acceptable.
    """

    @abstractmethod
    def on_check_in(self, *, point: Optional[GeoPoint], offices: Sequence[OfficeLocation]) -> dict:
        raise NotImplementedError

    @abstractmethod
    def on_check_out(self, *, point: Optional[GeoPoint], offices: Sequence[OfficeLocation]) -> dict:
        raise NotImplementedError
