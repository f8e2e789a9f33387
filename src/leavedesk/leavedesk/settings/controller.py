from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/settings", methods=["GET"], endpoint="admin_settings")
    def admin_settings():
        return jsonify(container.settings_service.admin_settings())

    @app.route("/api/admin/settings", methods=["PUT"], endpoint="admin_update_settings")
    def admin_update_settings():
        return jsonify(container.settings_service.update_settings(json_body()))

    @app.route("/api/admin/leaves/reset", methods=["POST"], endpoint="admin_reset_leaves")
    def admin_reset_leaves():
        reset_date = container.settings_service.reset_leave_cycle()
        return jsonify({"success": True, "leave_reset_date": reset_date.isoformat()})

    @app.route("/api/settings/public", methods=["GET"], endpoint="public_settings")
    def public_settings():
        return jsonify(container.settings_service.public_settings())
