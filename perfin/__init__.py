"""Perfin application factory and bootstrap."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from flask import Flask
from sqlalchemy import text

from perfin.config import config_by_name
from perfin.extensions import db, init_extensions


def create_app(config_name: Optional[str] = None) -> Flask:
    """Create and configure the Perfin Flask application."""
    env_name = (config_name or os.environ.get("APP_ENV") or "development").lower()
    project_root = Path(__file__).resolve().parent.parent
    instance_root = project_root / "instance"

    app = Flask(__name__, instance_path=str(instance_root), instance_relative_config=True)
    config_cls = config_by_name.get(env_name, config_by_name["development"])
    app.config.from_object(config_cls)

    # Normalize sqlite path to absolute to avoid "unable to open database file"
    db_uri = app.config.get("SQLALCHEMY_DATABASE_URI") or ""
    if db_uri.startswith("sqlite:///"):
        abs_path = project_root / db_uri.replace("sqlite:///", "", 1)
        abs_path.parent.mkdir(parents=True, exist_ok=True)
        app.config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{abs_path}"

    _configure_logging(app)
    init_extensions(app)
    _register_blueprints(app)
    _register_error_handlers(app)

    @app.get("/health")
    def health():
        return {"ok": True}, 200

    @app.get("/health/db")
    def health_db():
        try:
            db.session.execute(text("SELECT 1"))
        except Exception as exc:
            app.logger.error("Database health check failed: %s", exc)
            return {"ok": False, "error": "database_unavailable"}, 503
        return {"ok": True, "database": "connected"}, 200

    from perfin.cli import register_commands

    register_commands(app)

    return app


def _configure_logging(app: Flask) -> None:
    level = str(app.config.get("LOG_LEVEL", "INFO")).upper()
    logging.getLogger("perfin").setLevel(level)
    app.logger.setLevel(level)


def _register_blueprints(app: Flask) -> None:
    """Lazy import and register all controllers."""
    from perfin.core.auth.controllers import auth_bp  # local import to avoid circulars
    from perfin.domains.finance.controllers.accounts_api import accounts_api_bp
    from perfin.domains.finance.controllers.categories_api import categories_api_bp
    from perfin.domains.finance.controllers.dashboard_api import dashboard_api_bp
    from perfin.domains.finance.controllers.lending_api import lending_api_bp
    from perfin.domains.finance.controllers.transactions_api import transactions_api_bp

    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(accounts_api_bp, url_prefix="/api/finance")
    app.register_blueprint(transactions_api_bp, url_prefix="/api/finance")
    app.register_blueprint(categories_api_bp, url_prefix="/api/finance")
    app.register_blueprint(lending_api_bp, url_prefix="/api/finance")
    app.register_blueprint(dashboard_api_bp, url_prefix="/api/finance")


def _register_error_handlers(app: Flask) -> None:
    """JSON error responses."""
    from werkzeug.exceptions import HTTPException

    from perfin.domains.finance.errors import FinanceError

    @app.errorhandler(FinanceError)
    def _finance_error(exc: FinanceError):
        return exc.to_dict(), exc.status

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return {"ok": False, "error": exc.description}, exc.code

    @app.errorhandler(Exception)
    def _generic_error(exc: Exception):
        app.logger.exception("Unhandled error: %s", exc)
        # In debug/testing, surface the exception message to speed up diagnosis
        if app.debug or app.testing:
            return {"ok": False, "error": str(exc)}, 500
        return {"ok": False, "error": "unexpected_error"}, 500
