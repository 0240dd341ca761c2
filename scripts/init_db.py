from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv

from participant_system.config import get_settings_module
from participant_system.database.bootstrap import apply_schema

logger = logging.getLogger("init_db")


def main() -> None:
    load_dotenv(override=False)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    schema_path = Path(__file__).resolve().parents[1] / "database" / "schema.sql"
    count = apply_schema(db_config, schema_path=schema_path)
    logger.info(
        "Applied schema.sql -> %s@%s:%s/%s (%d statements)",
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
        count,
    )


if __name__ == "__main__":
    main()
