from __future__ import annotations

from typing import Mapping, Optional, Protocol, Sequence


class SettingsRepository(Protocol):
    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def get_many(self, keys: Sequence[str]) -> Mapping[str, Optional[str]]:
        raise NotImplementedError

    def set(self, key: str, value: Optional[str]) -> None:
        raise NotImplementedError
