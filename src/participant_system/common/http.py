from __future__ import annotations

import dataclasses
import logging
from datetime import date, datetime
from enum import Enum
from functools import wraps
from typing import Any

from flask import Flask, jsonify, session

from ..core.enums import Role
from ..core.exceptions import (
    ActiveBanExistsError,
    AlreadyLiftedError,
    AuthorizationError,
    BlacklistedError,
    NotFoundError,
    StorageError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "message": "Login required"}), 401
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "message": "Login required"}), 401
        if session.get("role") != Role.ADMIN.value:
            raise AuthorizationError("Administrator access required")
        return view(*args, **kwargs)

    return wrapper


def current_user_id() -> str:
    return str(session["user_id"])


def to_json(value: Any) -> Any:
    """Convert dataclasses/enums/dates into JSON-friendly values."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_json(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")
    if isinstance(value, dict):
        return {to_json(k) if not isinstance(k, str) else k: to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    return value


def register_error_handlers(app: Flask) -> None:
    def _error(message: str, status: int, **extra):
        return jsonify({"success": False, "message": message, **extra}), status

    @app.errorhandler(ValidationError)
    def _validation(e: ValidationError):
        return _error(str(e), 400)

    @app.errorhandler(AuthorizationError)
    def _forbidden(e: AuthorizationError):
        return _error(str(e), 403)

    @app.errorhandler(NotFoundError)
    def _not_found(e: NotFoundError):
        return _error(str(e), 404)

    @app.errorhandler(AlreadyLiftedError)
    def _already_lifted(e: AlreadyLiftedError):
        return _error(str(e), 409)

    @app.errorhandler(ActiveBanExistsError)
    def _active_ban(e: ActiveBanExistsError):
        return _error(str(e), 409, banned_until=e.banned_until.isoformat())

    @app.errorhandler(BlacklistedError)
    def _blacklisted(e: BlacklistedError):
        return _error(str(e), 409, banned_until=e.banned_until.isoformat())

    @app.errorhandler(StorageError)
    def _storage(e: StorageError):
        logger.error("Storage failure: %s", e)
        return _error("The data store is unavailable, please try again", 503)
