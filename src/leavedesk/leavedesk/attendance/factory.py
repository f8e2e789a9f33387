from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import CheckInMode
from ..core.exceptions import ValidationError
from .strategies.base import CheckInStrategy
from .strategies.office_strategy import OfficeCheckInStrategy
from .strategies.remote_strategy import RemoteCheckInStrategy


@dataclass
class CheckInStrategyFactory:
    """Factory Pattern: choose the location strategy for a check-in mode."""

    def for_mode(self, mode: str) -> CheckInStrategy:
        try:
            mode_e = CheckInMode(mode)
        except ValueError:
            raise ValidationError("Invalid check-in mode")

        if mode_e == CheckInMode.AVAILABLE:
            return OfficeCheckInStrategy()
        return RemoteCheckInStrategy()

    def for_status(self, status: str) -> CheckInStrategy:
        """Strategy for checking out of a row created with ``status``."""

        if status == CheckInMode.AVAILABLE.value:
            return OfficeCheckInStrategy()
        return RemoteCheckInStrategy()
