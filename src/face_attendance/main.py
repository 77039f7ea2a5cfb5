from __future__ import annotations

import importlib
import logging
from typing import Any, Mapping, Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.logging_setup import configure_logging
from .container import build_container
from .core.enums import StorageBackend
from .database.bootstrap import apply_schema, list_tables

logger = logging.getLogger(__name__)


def load_settings(settings_module: Optional[str] = None) -> dict[str, Any]:
    module = importlib.import_module(settings_module or get_settings_module())
    return {k: getattr(module, k) for k in dir(module) if k.isupper()}


def create_app(settings: Optional[Mapping[str, Any]] = None, *, container=None) -> Flask:
    load_dotenv(override=False)
    settings = dict(settings) if settings is not None else load_settings()

    configure_logging(settings.get("LOG_LEVEL", "INFO"))

    app = Flask(__name__)
    app.secret_key = settings.get("SECRET_KEY", "dev-secret-key")
    app.config["DEBUG"] = bool(settings.get("DEBUG", False))
    app.config["TESTING"] = bool(settings.get("TESTING", False))

    backend = str(settings.get("STORAGE_BACKEND", StorageBackend.FILE.value)).lower()
    if container is None and backend == StorageBackend.MYSQL.value and settings.get("AUTO_INIT_DB"):
        db_config = settings["DB_CONFIG"]
        apply_schema(db_config)
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

    container = container or build_container(settings=settings)
    app.extensions["face_attendance"] = container

    register_attendance(app, container)

    logger.info(
        "Attendance app ready (backend=%s, records=%d)",
        backend,
        len(container.attendance_store.get_records()),
    )
    return app


def run() -> None:
    app = create_app()
    # One thread: the store is not synchronized.
    app.run(host="0.0.0.0", port=5000, debug=app.config["DEBUG"], threaded=False, use_reloader=False)


if __name__ == "__main__":
    run()
