from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_body, optional_arg
from ..container import Container
from ..core.exceptions import ValidationError


def _year_arg():
    raw = optional_arg("year")
    if raw is None:
        return None
    if not raw.isdigit() or not 1900 <= int(raw) <= 9999:
        raise ValidationError("year must be a four-digit year")
    return int(raw)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/holidays", methods=["GET"], endpoint="holidays")
    def holidays():
        found = container.holiday_service.list_holidays(year=_year_arg(), department=optional_arg("department"))
        return jsonify([h.to_dict() for h in found])

    @app.route("/api/admin/holidays", methods=["GET"], endpoint="admin_holidays")
    def admin_holidays():
        found = container.holiday_service.list_holidays(year=_year_arg())
        return jsonify([h.to_dict() for h in found])

    @app.route("/api/admin/holidays", methods=["POST"], endpoint="admin_create_holiday")
    def admin_create_holiday():
        holiday = container.holiday_service.create_holiday(json_body())
        return jsonify(holiday.to_dict()), 201

    @app.route("/api/admin/holidays/<int:holiday_id>", methods=["DELETE"], endpoint="admin_delete_holiday")
    def admin_delete_holiday(holiday_id: int):
        container.holiday_service.delete_holiday(holiday_id)
        return jsonify({"success": True})
