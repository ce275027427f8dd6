from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from .common.logging_config import configure_logging
from .config import get_settings_module
from .core.exceptions import NotFoundError, SettlementConsistencyError, StorageError, ValidationError
from .database.bootstrap import apply_schema, list_tables
from .database.connection import DBConfig, DatabaseConnection
from .database.kv_store import KeyValueStore
from .database.mysql_kv_store import MySQLKeyValueStore

from .container import build_container
from .advances.controller import register as register_advances
from .attendance.controller import register as register_attendance
from .folders.controller import register as register_folders
from .payroll.controller import register as register_payroll
from .workers.controller import register as register_workers

logger = logging.getLogger(__name__)


def create_app(store: Optional[KeyValueStore] = None, **overrides) -> Flask:
    """Build the Flask app.

    `store` replaces the MySQL key-value store (tests pass an in-memory one).
    `overrides` win over the settings module (e.g. REPORTS_DIR).
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["REPORTS_DIR"] = getattr(settings, "REPORTS_DIR", "reports")
    app.config["DEFAULT_EXPORT_FORMAT"] = getattr(settings, "DEFAULT_EXPORT_FORMAT", "xlsx")
    app.config.update(overrides)

    configure_logging(level=getattr(settings, "LOG_LEVEL", "INFO"))

    if store is None:
        db_config = DBConfig.from_dict(getattr(settings, "DB_CONFIG"))
        conn = DatabaseConnection.get_instance(db_config)
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module, db_config.user, db_config.host, db_config.port, db_config.database,
        )
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(conn)
            logger.info("schema ready (tables=%d)", len(list_tables(conn)))
        store = MySQLKeyValueStore(conn)

    container = build_container(
        store=store,
        reports_dir=app.config["REPORTS_DIR"],
        default_export_format=app.config["DEFAULT_EXPORT_FORMAT"],
    )
    app.extensions["payroll_ledger"] = container

    _register_error_handlers(app)
    register_folders(app, container)
    register_workers(app, container)
    register_attendance(app, container)
    register_advances(app, container)
    register_payroll(app, container)

    return app


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def handle_validation(e: ValidationError):
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(NotFoundError)
    def handle_not_found(e: NotFoundError):
        return jsonify({"error": str(e)}), 404

    @app.errorhandler(SettlementConsistencyError)
    def handle_settlement(e: SettlementConsistencyError):
        return jsonify({"error": str(e)}), 500

    @app.errorhandler(StorageError)
    def handle_storage(e: StorageError):
        logger.error("Storage failure: %s", e)
        return jsonify({"error": "Storage is unavailable, please try again"}), 500
