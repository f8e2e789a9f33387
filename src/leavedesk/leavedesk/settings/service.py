from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional

from ..common.datetime_utils import now_local, parse_iso_date
from ..core.constants import SETTING_BIRTHDAY_ENABLED, SETTING_COMMON_INFO, SETTING_LEAVE_RESET_DATE
from .model import LeaveCycle
from .repository import SettingsRepository

logger = logging.getLogger(__name__)


def _as_flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in {"true", "1", "yes"}


class SettingsService:
    def __init__(self, settings: SettingsRepository):
        self._settings = settings

    def admin_settings(self) -> dict[str, Any]:
        values = self._settings.get_many([SETTING_COMMON_INFO, SETTING_BIRTHDAY_ENABLED, SETTING_LEAVE_RESET_DATE])
        return {
            "common_info": values.get(SETTING_COMMON_INFO) or "",
            "birthday_feature_enabled": _as_flag(values.get(SETTING_BIRTHDAY_ENABLED)),
            "leave_reset_date": values.get(SETTING_LEAVE_RESET_DATE),
        }

    def public_settings(self) -> dict[str, Any]:
        values = self._settings.get_many([SETTING_COMMON_INFO, SETTING_BIRTHDAY_ENABLED])
        return {
            "common_info": values.get(SETTING_COMMON_INFO) or "",
            "birthday_feature_enabled": _as_flag(values.get(SETTING_BIRTHDAY_ENABLED)),
        }

    def update_settings(self, body: dict[str, Any]) -> dict[str, Any]:
        if "common_info" in body:
            self._settings.set(SETTING_COMMON_INFO, str(body.get("common_info") or ""))
        if "birthday_feature_enabled" in body:
            enabled = bool(body.get("birthday_feature_enabled"))
            self._settings.set(SETTING_BIRTHDAY_ENABLED, "true" if enabled else "false")
        return self.admin_settings()

    def reset_leave_cycle(self, today: Optional[date] = None) -> date:
        """Start a new leave cycle; leaves up to and including today stop counting."""

        today = today or now_local().date()
        self._settings.set(SETTING_LEAVE_RESET_DATE, today.isoformat())
        logger.info("Leave cycle reset on %s", today.isoformat())
        return today

    def leave_reset_date(self) -> Optional[date]:
        raw = self._settings.get(SETTING_LEAVE_RESET_DATE)
        if not raw:
            return None
        try:
            return parse_iso_date(raw[:10])
        except ValueError:
            logger.warning("Ignoring malformed %s setting: %r", SETTING_LEAVE_RESET_DATE, raw)
            return None

    def current_cycle(self, today: Optional[date] = None) -> LeaveCycle:
        today = today or now_local().date()
        return LeaveCycle.for_today(today, self.leave_reset_date())
