from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from .attendance.controller import register as register_attendance
from .blacklist.controller import register as register_blacklist
from .common.http import register_error_handlers
from .config import get_settings_module
from .container import Container, build_container
from .database.bootstrap import apply_schema
from .enrollments.controller import register as register_enrollments
from .notifications.controller import register as register_notifications

logger = logging.getLogger(__name__)


def create_app(container: Container | None = None, *, settings_module: str | None = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[2] / "database" / "schema.sql"
            count = apply_schema(db_config, schema_path=schema_path)
            logger.info("schema ready (%d statements)", count)

        container = build_container(
            db_config=db_config,
            mail_config={
                "api_key": getattr(settings, "RESEND_API_KEY", ""),
                "from_address": getattr(settings, "MAIL_FROM", ""),
                "api_url": getattr(settings, "MAIL_API_URL", ""),
            },
            absence_threshold=int(getattr(settings, "ABSENCE_THRESHOLD", 3)),
            ban_duration_months=int(getattr(settings, "BAN_DURATION_MONTHS", 6)),
        )

    app.extensions["participant_system"] = container

    register_error_handlers(app)
    register_attendance(app, container)
    register_blacklist(app, container)
    register_enrollments(app, container)
    register_notifications(app, container)

    return app
