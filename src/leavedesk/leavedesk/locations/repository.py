from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import OfficeLocation


class LocationRepository(Protocol):
    def list_all(self) -> Sequence[OfficeLocation]:
        raise NotImplementedError

    def get_by_id(self, location_id: int) -> Optional[OfficeLocation]:
        raise NotImplementedError

    def create(self, location: OfficeLocation) -> int:
        raise NotImplementedError

    def update(self, location: OfficeLocation) -> bool:
        raise NotImplementedError

    def delete_by_id(self, location_id: int) -> bool:
        raise NotImplementedError
