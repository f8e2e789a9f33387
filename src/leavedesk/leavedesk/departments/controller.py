from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import json_body, optional_arg
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/departments", methods=["GET"], endpoint="admin_departments")
    def admin_departments():
        return jsonify(container.department_service.list_departments())

    @app.route("/api/admin/leaves/limits", methods=["GET"], endpoint="admin_leave_limits")
    def admin_leave_limits():
        limits = container.department_service.get_limits(optional_arg("department"))
        return jsonify([l.to_dict() for l in limits])

    @app.route("/api/admin/leaves/limits", methods=["POST"], endpoint="admin_save_leave_limits")
    def admin_save_leave_limits():
        body = json_body()
        saved = container.department_service.save_limits(body.get("department"), body.get("limits"))
        return jsonify({"success": True, "data": [l.to_dict() for l in saved]})

    @app.route("/api/admin/leaves/types", methods=["GET"], endpoint="admin_leave_types")
    def admin_leave_types():
        types = container.department_service.leave_types(request.args.get("department"))
        return jsonify([t.to_dict() for t in types])

    @app.route("/api/admin/policies", methods=["GET"], endpoint="admin_policies")
    def admin_policies():
        return jsonify([p.to_dict() for p in container.department_service.list_policies()])

    @app.route("/api/admin/policies", methods=["POST"], endpoint="admin_save_policy")
    def admin_save_policy():
        policy = container.department_service.save_policy(json_body())
        return jsonify({"success": True, "data": policy.to_dict()})
