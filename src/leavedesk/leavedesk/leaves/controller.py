from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_role, current_user_id, json_body, optional_arg
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/leaves", methods=["POST"], endpoint="apply_leave")
    def apply_leave():
        leave = container.leave_service.apply(
            current_user_id=current_user_id(),
            current_role=current_role(),
            body=json_body(),
        )
        return jsonify(leave.to_dict())

    @app.route("/api/leaves", methods=["GET"], endpoint="my_leaves")
    def my_leaves():
        leaves = container.leave_service.list_own(current_user_id(), optional_arg("status"))
        return jsonify([l.to_dict() for l in leaves])

    @app.route("/api/leaves", methods=["DELETE"], endpoint="cancel_leave")
    def cancel_leave():
        container.leave_service.cancel(
            current_user_id=current_user_id(),
            leave_id=request.args.get("id"),
            owner_id=optional_arg("userId"),
        )
        return jsonify({"success": True})

    @app.route("/api/leaves/approve", methods=["POST"], endpoint="decide_leave")
    def decide_leave():
        body = json_body()
        container.leave_service.decide(
            approver_id=current_user_id(),
            approver_role=current_role(),
            leave_id=body.get("leaveId"),
            status=body.get("status"),
        )
        return jsonify({"success": True})

    @app.route("/api/leaves/pending", methods=["GET"], endpoint="pending_leaves")
    def pending_leaves():
        rows = container.leave_service.list_pending(approver_id=current_user_id(), approver_role=current_role())
        return jsonify([r.to_dict() for r in rows])

    @app.route("/api/leaves/balance", methods=["GET"], endpoint="leave_balance")
    def leave_balance():
        balances = container.leave_service.balance(
            current_user_id=current_user_id(),
            current_role=current_role(),
            user_id=optional_arg("userId"),
        )
        return jsonify({"balances": balances})

    @app.route("/api/leaves/regularization", methods=["POST"], endpoint="request_regularization")
    def request_regularization():
        leave = container.leave_service.submit_regularization(
            current_user_id=current_user_id(),
            current_role=current_role(),
            body=json_body(),
        )
        return jsonify(leave.to_dict())
