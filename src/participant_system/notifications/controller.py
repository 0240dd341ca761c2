from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import admin_required, current_user_id, login_required, to_json
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/changes", methods=["POST"], endpoint="remote_changes")
    @admin_required
    def remote_changes():
        """Entry point for the store's change stream relay."""
        data = request.get_json(silent=True)
        payloads = data if isinstance(data, list) else [data or {}]
        published = container.change_feed.consume(payloads)
        return jsonify({"success": True, "published": published})

    @app.route("/api/me/notifications", methods=["GET"], endpoint="my_notifications")
    @login_required
    def my_notifications():
        items = container.inbox.for_participant(current_user_id())
        return jsonify({"success": True, "unread": len(items), "notifications": to_json(items)})

    @app.route("/api/me/notifications", methods=["DELETE"], endpoint="clear_notifications")
    @login_required
    def clear_notifications():
        container.inbox.clear(current_user_id())
        return jsonify({"success": True})
