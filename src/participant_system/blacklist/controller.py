from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import admin_required, current_user_id, login_required, to_json
from ..container import Container
from .model import BanOutcome


def _outcome_json(outcome: BanOutcome):
    return jsonify({"success": True, "record": to_json(outcome.record), "warning": outcome.email_warning})


def register(app: Flask, container: Container) -> None:
    engine = container.blacklist_engine

    @app.route("/api/blacklist", methods=["GET"], endpoint="blacklist_records")
    @admin_required
    def blacklist_records():
        rows = engine.list_records(request.args.get("state") or None)
        return jsonify({"success": True, "records": to_json(rows)})

    @app.route("/api/blacklist", methods=["POST"], endpoint="apply_ban")
    @admin_required
    def apply_ban():
        data = request.get_json(silent=True) or {}
        outcome = engine.apply_ban(
            data.get("participant_id"),
            data.get("program_id"),
            reason=data.get("reason") or "",
            actor_id=current_user_id(),
            duration_months=data.get("duration_months"),
        )
        return _outcome_json(outcome), 201

    @app.route("/api/blacklist/<int:blacklist_id>/lift", methods=["POST"], endpoint="lift_ban")
    @admin_required
    def lift_ban(blacklist_id: int):
        return _outcome_json(engine.lift_ban(blacklist_id, current_user_id()))

    @app.route("/api/participants/<participant_id>/blacklist", methods=["GET"], endpoint="participant_blacklist")
    @admin_required
    def participant_blacklist(participant_id: str):
        return jsonify({"success": True, "records": to_json(engine.history(participant_id))})

    @app.route("/api/me/blacklist", methods=["GET"], endpoint="my_blacklist_status")
    @login_required
    def my_blacklist_status():
        ban = engine.current_ban(current_user_id())
        return jsonify({"success": True, "banned": ban is not None, "record": to_json(ban)})
