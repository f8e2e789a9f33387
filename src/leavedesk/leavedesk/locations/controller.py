from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/locations", methods=["GET"], endpoint="locations")
    def locations():
        return jsonify([l.to_dict() for l in container.location_service.list_locations()])

    @app.route("/api/admin/locations", methods=["POST"], endpoint="admin_create_location")
    def admin_create_location():
        location = container.location_service.create_location(json_body())
        return jsonify(location.to_dict()), 201

    @app.route("/api/admin/locations/<int:location_id>", methods=["PUT"], endpoint="admin_update_location")
    def admin_update_location(location_id: int):
        location = container.location_service.update_location(location_id, json_body())
        return jsonify(location.to_dict())

    @app.route("/api/admin/locations/<int:location_id>", methods=["DELETE"], endpoint="admin_delete_location")
    def admin_delete_location(location_id: int):
        container.location_service.delete_location(location_id)
        return jsonify({"success": True})
