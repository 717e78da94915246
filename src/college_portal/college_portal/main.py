from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .core.constants import DEFAULT_EDIT_WINDOW_MINUTES, DEFAULT_EMAIL_DOMAIN
from .core.enums import Branch
from .database.bootstrap import apply_schema, ensure_demo_users, list_tables
from .database.connection import DBConfig

from .container import Container, build_container
from .analytics.controller import register as register_analytics
from .announcements.controller import register as register_announcements
from .attendance.controller import register as register_attendance
from .marks.controller import register as register_marks
from .students.controller import register as register_students
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[3]


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory.

    Pass ``container`` to run over other repositories (tests); otherwise
    MySQL repositories are built from the selected settings module.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["BRANCHES"] = list(getattr(settings, "BRANCHES", [b.value for b in Branch]))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info("settings=%s db=%s", settings_module, DBConfig.from_mapping(db_config).describe())

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_users(db_config)

        container = build_container(
            db_config=db_config,
            edit_window_minutes=int(getattr(settings, "EDIT_WINDOW_MINUTES", DEFAULT_EDIT_WINDOW_MINUTES)),
            email_domain=str(getattr(settings, "EMAIL_DOMAIN", DEFAULT_EMAIL_DOMAIN)),
        )

    register_users(app, container)
    register_students(app, container)
    register_attendance(app, container)
    register_analytics(app, container)
    register_marks(app, container)
    register_announcements(app, container)

    return app
