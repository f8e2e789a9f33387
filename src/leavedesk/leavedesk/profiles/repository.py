from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Profile, UserDetails


class ProfileRepository(Protocol):
    """Repository interface for profiles.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, profile_id: str) -> Optional[Profile]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Profile]:
        raise NotImplementedError

    def list_profiles(
        self,
        *,
        exclude_role: Optional[Role] = None,
        department: Optional[str] = None,
    ) -> Sequence[Profile]:
        """Profiles ordered by full name."""

        raise NotImplementedError

    def list_department_values(self) -> Sequence[Optional[str]]:
        """Raw department column of every profile (may contain blanks)."""

        raise NotImplementedError

    def create(self, profile: Profile) -> str:
        raise NotImplementedError

    def update(self, profile_id: str, fields: dict[str, Any]) -> bool:
        raise NotImplementedError

    def delete_by_id(self, profile_id: str) -> bool:
        raise NotImplementedError

    def get_details(self, profile_id: str) -> Optional[UserDetails]:
        raise NotImplementedError

    def upsert_details(self, details: UserDetails) -> None:
        raise NotImplementedError
