import sys
from pathlib import Path

import pytest
from flask_jwt_extended import create_access_token

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from perfin import create_app
from perfin.core.auth.password import hash_password
from perfin.core.users.models import User
from perfin.domains.finance.services import account_service
from perfin.extensions import db

OWNER_PASSWORD = "letmein123"


# ==================== Pytest Markers ====================
def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (database, API)")
    config.addinivalue_line("markers", "slow: Slow running tests")


@pytest.fixture()
def app():
    """Per-test app on a fresh in-memory database.

    One app context stays pushed for the whole test, so test code and the
    requests made through ``client`` share the same scoped session.
    """
    app = create_app("testing")
    ctx = app.app_context()
    ctx.push()
    db.create_all()
    try:
        yield app
    finally:
        db.session.remove()
        db.drop_all()
        ctx.pop()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def owner(app):
    user = User(
        email=app.config["OWNER_EMAIL"],
        password_hash=hash_password(OWNER_PASSWORD),
        full_name="Owner",
    )
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture()
def stranger(app):
    user = User(email="stranger@example.com", password_hash=hash_password("not-the-owner"))
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture()
def auth_headers(owner):
    return {"Authorization": f"Bearer {create_access_token(identity=str(owner.id))}"}


@pytest.fixture()
def make_account(owner):
    def _make(name="Checking", balance="0", account_type="checking", user=None):
        return account_service.create_account(
            (user or owner).id, name=name, account_type=account_type, balance=balance
        )

    return _make
