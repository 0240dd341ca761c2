from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import admin_required, current_user_id, login_required, to_json
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.enrollment_service

    @app.route("/api/programs/<int:program_id>/applications", methods=["POST"], endpoint="apply_to_program")
    @login_required
    def apply_to_program(program_id: int):
        enrollment = service.apply(current_user_id(), program_id)
        return jsonify({"success": True, "application": to_json(enrollment)}), 201

    @app.route("/api/programs/<int:program_id>/applications", methods=["GET"], endpoint="program_applications")
    @admin_required
    def program_applications(program_id: int):
        rows = service.list_for_program(program_id, request.args.get("status") or None)
        return jsonify({"success": True, "applications": to_json(rows)})

    @app.route("/api/applications/<int:enrollment_id>/status", methods=["PUT"], endpoint="application_status")
    @admin_required
    def application_status(enrollment_id: int):
        data = request.get_json(silent=True) or {}
        enrollment = service.update_status(enrollment_id, data.get("status"))
        return jsonify({"success": True, "application": to_json(enrollment)})

    @app.route("/api/applications/<int:enrollment_id>", methods=["DELETE"], endpoint="delete_application")
    @admin_required
    def delete_application(enrollment_id: int):
        service.delete(enrollment_id)
        return jsonify({"success": True})

    @app.route("/api/me/applications", methods=["GET"], endpoint="my_applications")
    @login_required
    def my_applications():
        return jsonify({"success": True, "applications": to_json(service.list_for_participant(current_user_id()))})

    @app.route("/api/me/can-enroll", methods=["GET"], endpoint="can_enroll")
    @login_required
    def can_enroll():
        return jsonify({"success": True, "can_enroll": container.enrollment_gate.can_enroll(current_user_id())})
