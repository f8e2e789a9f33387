from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.http import current_role, current_user_id, json_body
from ..container import Container
from .service import UserForm


def register(app: Flask, container: Container) -> None:
    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok"})

    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        body = json_body()
        s_user = container.auth_service.authenticate(body.get("email", ""), body.get("password", ""))

        session.clear()
        session["user_id"] = s_user.user_id
        session["name"] = s_user.full_name
        session["role"] = s_user.role.value
        session["department"] = s_user.department

        return jsonify(
            {
                "id": s_user.user_id,
                "full_name": s_user.full_name,
                "role": s_user.role.value,
                "department": s_user.department,
            }
        )

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/profile", methods=["GET"], endpoint="my_profile")
    def my_profile():
        return jsonify(container.profile_service.get_user_view(current_user_id()))

    @app.route("/api/profile/update", methods=["PUT"], endpoint="update_profile")
    def update_profile():
        container.profile_service.update_own_profile(
            current_user_id=current_user_id(),
            current_role=current_role(),
            body=json_body(),
        )
        return jsonify({"success": True})

    @app.route("/api/admin/users", methods=["GET"], endpoint="admin_get_user")
    def admin_get_user():
        return jsonify(container.profile_service.get_user_view(request.args.get("id")))

    @app.route("/api/admin/users", methods=["POST"], endpoint="admin_create_user")
    def admin_create_user():
        user_id = container.profile_service.create_user(UserForm.from_payload(json_body()))
        return jsonify({"success": True, "user": {"id": user_id}}), 201

    @app.route("/api/admin/users", methods=["PUT"], endpoint="admin_update_user")
    def admin_update_user():
        body = json_body()
        container.profile_service.update_user(body.get("id"), UserForm.from_payload(body))
        return jsonify({"success": True})

    @app.route("/api/admin/users", methods=["DELETE"], endpoint="admin_delete_user")
    def admin_delete_user():
        container.profile_service.delete_user(current_user_id=current_user_id(), user_id=request.args.get("id"))
        return jsonify({"success": True})

    @app.route("/api/admin/update-manager", methods=["POST"], endpoint="admin_update_manager")
    def admin_update_manager():
        body = json_body()
        container.profile_service.update_managers(body.get("userId"), body.get("managerIds"))
        return jsonify({"success": True})
