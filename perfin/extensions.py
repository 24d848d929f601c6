"""Flask extensions shared across Perfin."""

from pathlib import Path

from flask import jsonify
from flask_bcrypt import Bcrypt
from flask_jwt_extended import JWTManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

# Ledger services reuse loaded rows after commit; balances are re-read explicitly.
db = SQLAlchemy(session_options={"expire_on_commit": False})
migrate = Migrate()
jwt = JWTManager()
bcrypt = Bcrypt()
# Limits and storage come from RATELIMIT_* config keys at init time.
limiter = Limiter(key_func=get_remote_address)


@jwt.unauthorized_loader
def _missing_token(reason: str):
    return jsonify({"ok": False, "error": "unauthorized", "message": reason}), 401


@jwt.invalid_token_loader
def _invalid_token(reason: str):
    return jsonify({"ok": False, "error": "invalid_token", "message": reason}), 401


@jwt.expired_token_loader
def _expired_token(jwt_header, jwt_payload):
    return jsonify({"ok": False, "error": "token_expired"}), 401


def init_extensions(app) -> None:
    """Bind every extension to ``app``."""
    db.init_app(app)
    migrate.init_app(app, db, directory=str(Path(__file__).resolve().parent / "migrations"))
    jwt.init_app(app)
    bcrypt.init_app(app)
    limiter.init_app(app)
