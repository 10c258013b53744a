from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import Container, build_container
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables
from .reports.controller import register as register_reports
from .shifts.controller import register as register_shifts

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["OVERTIME_TICK_SECONDS"] = int(getattr(settings, "OVERTIME_TICK_SECONDS", 60))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        if app.config["DEBUG"]:
            logger.info(
                "settings=%s db=%s@%s:%s/%s",
                settings_module,
                db_config.get("user"),
                db_config.get("host"),
                db_config.get("port", 3306),
                db_config.get("database"),
            )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            seed_path = Path(__file__).resolve().parents[3] / "database" / "seed.sql"
            apply_seed_sql(db_config, seed_path=seed_path)
            logger.info("demo seed ready")

        container = build_container(
            db_config=db_config,
            night_shift_bonus_minutes=int(getattr(settings, "NIGHT_SHIFT_BONUS_MINUTES", 120)),
            busy_window_hours=int(getattr(settings, "BUSY_WINDOW_HOURS", 24)),
        )

    register_shifts(app, container)
    register_reports(app, container)

    return app
