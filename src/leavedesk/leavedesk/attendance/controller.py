from __future__ import annotations

from typing import Any, Optional

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local
from ..common.http import current_role, current_user_id, int_arg, optional_arg
from ..container import Container
from ..core.exceptions import ValidationError
from ..locations.model import GeoPoint


def _point(body: dict[str, Any]) -> Optional[GeoPoint]:
    lat, lon = body.get("latitude"), body.get("longitude")
    if lat is None or lon is None:
        return None
    try:
        return GeoPoint(latitude=float(lat), longitude=float(lon))
    except (TypeError, ValueError):
        raise ValidationError("Invalid coordinates")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="check_in")
    def check_in():
        body = request.get_json(silent=True) or {}
        record = container.attendance_service.check_in(
            current_user_id(),
            mode=str(body.get("mode") or ""),
            point=_point(body),
        )
        return jsonify({"success": True, "data": record.to_dict()})

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="check_out")
    def check_out():
        body = request.get_json(silent=True) or {}
        summary = container.attendance_service.check_out(current_user_id(), point=_point(body))
        return jsonify(
            {
                "success": True,
                "duration_minutes": summary.duration_minutes,
                "deviation_minutes": summary.deviation_minutes,
                "message": summary.message,
            }
        )

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    def attendance_today():
        return jsonify(container.attendance_service.today_status(current_user_id()))

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    def attendance_history():
        today = now_local().date()
        rows = container.attendance_service.history(
            current_user_id=current_user_id(),
            current_role=current_role(),
            user_id=optional_arg("userId"),
            month=int_arg("month", today.month),
            year=int_arg("year", today.year),
        )
        return jsonify([r.to_dict() for r in rows])

    @app.route("/api/admin/attendance", methods=["GET"], endpoint="admin_attendance")
    def admin_attendance():
        rows = container.attendance_service.admin_list(
            start_date=optional_arg("startDate"),
            end_date=optional_arg("endDate"),
            department=optional_arg("department"),
            name=optional_arg("name"),
        )
        return jsonify([r.to_dict() for r in rows])

    @app.route("/api/manager/attendance", methods=["GET"], endpoint="manager_attendance")
    @app.route("/api/hr/attendance", methods=["GET"], endpoint="hr_attendance")
    def team_attendance():
        rows = container.attendance_service.team_attendance(
            viewer_id=current_user_id(),
            viewer_role=current_role(),
            day=optional_arg("date"),
            department=optional_arg("department"),
        )
        return jsonify([r.to_dict() for r in rows])
