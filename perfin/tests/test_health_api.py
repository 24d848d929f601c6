from __future__ import annotations

import pytest
from sqlalchemy.exc import OperationalError

from perfin.extensions import db

pytestmark = pytest.mark.integration


def test_health_is_public(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.get_json() == {"ok": True}


def test_health_db_reports_connected(client):
    resp = client.get("/health/db")
    assert resp.status_code == 200
    assert resp.get_json()["database"] == "connected"


def test_health_db_reports_outage(client, monkeypatch):
    def boom(*args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    monkeypatch.setattr(db.session, "execute", boom)

    resp = client.get("/health/db")

    assert resp.status_code == 503
    assert resp.get_json()["error"] == "database_unavailable"


def test_unknown_route_is_json_404(client):
    resp = client.get("/api/finance/nope")
    assert resp.status_code == 404
