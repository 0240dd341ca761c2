from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import admin_required, current_user_id, login_required, to_json
from ..container import Container
from .export import export_attendance_csv


def register(app: Flask, container: Container) -> None:
    ledger = container.attendance_ledger

    @app.route("/api/programs/<int:program_id>/attendance", methods=["GET"], endpoint="program_attendance")
    @admin_required
    def program_attendance(program_id: int):
        rows = ledger.query(program_id, request.args.get("date") or None)
        return jsonify({"success": True, "records": to_json(rows)})

    @app.route("/api/programs/<int:program_id>/attendance", methods=["PUT"], endpoint="mark_attendance")
    @admin_required
    def mark_attendance(program_id: int):
        data = request.get_json(silent=True) or {}
        record = ledger.mark_attendance(
            data.get("participant_id"),
            program_id,
            data.get("date"),
            data.get("status"),
            data.get("note"),
        )
        return jsonify({"success": True, "record": to_json(record)})

    @app.route("/api/programs/<int:program_id>/attendance/stats", methods=["GET"], endpoint="attendance_stats")
    @admin_required
    def attendance_stats(program_id: int):
        return jsonify({"success": True, "stats": to_json(ledger.stats(program_id))})

    @app.route(
        "/api/programs/<int:program_id>/participants/<participant_id>/absences",
        methods=["GET"],
        endpoint="participant_absences",
    )
    @admin_required
    def participant_absences(program_id: int, participant_id: str):
        threshold = request.args.get("threshold", type=int)
        return jsonify(
            {
                "success": True,
                "absences": container.absence_counter.count(participant_id, program_id),
                "suggest_blacklist": container.blacklist_engine.suggest_blacklist(participant_id, program_id, threshold),
            }
        )

    @app.route("/api/programs/<int:program_id>/attendance.csv", methods=["GET"], endpoint="attendance_csv")
    @admin_required
    def attendance_csv(program_id: int):
        rows = ledger.query(program_id, request.args.get("date") or None)
        names = container.profiles_repo.names_for(r.participant_id for r in rows)
        body = export_attendance_csv(rows, names=names)
        return app.response_class(
            body.encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename=attendance_program_{program_id}.csv"},
        )

    @app.route("/api/me/attendance", methods=["GET"], endpoint="my_attendance")
    @login_required
    def my_attendance():
        program_id = request.args.get("program_id") or None
        rows = ledger.for_participant(current_user_id(), program_id)
        return jsonify({"success": True, "records": to_json(rows)})
