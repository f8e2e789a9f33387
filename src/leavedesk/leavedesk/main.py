from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.datetime_utils import parse_hhmm
from .common.http import register_access_policy, register_error_handlers
from .core.constants import DEFAULT_LATE_AFTER
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables

from .container import Container, build_container
from .attendance.controller import register as register_attendance
from .departments.controller import register as register_departments
from .holidays.controller import register as register_holidays
from .leaves.controller import register as register_leaves
from .locations.controller import register as register_locations
from .profiles.controller import register as register_profiles
from .reports.controller import register as register_reports
from .settings.controller import register as register_settings

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[3]


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    late_after = parse_hhmm(getattr(settings, "LATE_AFTER", "")) if getattr(settings, "LATE_AFTER", "") else DEFAULT_LATE_AFTER

    register_error_handlers(app)
    register_access_policy(app)

    if container is None:
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
            ensure_demo_users(db_config)
            logger.info("Demo seed ready")

        container = build_container(db_config=db_config, late_after=late_after)

    register_profiles(app, container)
    register_departments(app, container)
    register_settings(app, container)
    register_locations(app, container)
    register_holidays(app, container)
    register_attendance(app, container)
    register_leaves(app, container)
    register_reports(app, container)

    return app
