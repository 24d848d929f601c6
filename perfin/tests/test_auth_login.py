from __future__ import annotations

import pytest

from perfin.core.auth.csrf import CSRF_HEADER, CSRF_TOKEN_SESSION_KEY

OWNER_PASSWORD = "letmein123"

pytestmark = pytest.mark.integration


def test_login_issues_token_and_csrf(client, owner):
    resp = client.post("/auth/login", json={"password": OWNER_PASSWORD})

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["ok"] is True
    assert body["access_token"]
    assert len(body["csrf_token"]) == 64
    assert body["user"]["email"] == owner.email
    assert "password_hash" not in body["user"]


def test_login_wrong_password_is_401(client, owner):
    resp = client.post("/auth/login", json={"password": "nope"})
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "invalid_credentials"


def test_login_without_owner_is_401(client):
    resp = client.post("/auth/login", json={"password": OWNER_PASSWORD})
    assert resp.status_code == 401


def test_login_missing_password_is_400(client, owner):
    resp = client.post("/auth/login", json={})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "bad_request"


def test_login_replaces_stale_session(client, owner):
    with client.session_transaction() as sess:
        sess[CSRF_TOKEN_SESSION_KEY] = "stale"
        sess["leftover"] = "value"

    token = client.post("/auth/login", json={"password": OWNER_PASSWORD}).get_json()["csrf_token"]

    with client.session_transaction() as sess:
        assert sess[CSRF_TOKEN_SESSION_KEY] == token
        assert "leftover" not in sess


def test_me_returns_owner(client, auth_headers, owner):
    resp = client.get("/auth/me", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.get_json()["user"]["id"] == owner.id
    assert client.get("/auth/me").status_code == 401


def test_login_token_passes_csrf_gate(app, client, owner, make_account):
    app.config["WTF_CSRF_ENABLED"] = True
    account = make_account()
    body = client.post("/auth/login", json={"password": OWNER_PASSWORD}).get_json()
    headers = {"Authorization": f"Bearer {body['access_token']}", CSRF_HEADER: body["csrf_token"]}

    resp = client.post(
        "/api/finance/transactions",
        json={
            "account_id": account.id,
            "amount": 12,
            "type": "expense",
            "description": "Coffee",
            "category": "Food",
            "transaction_date": "2024-06-01",
        },
        headers=headers,
    )

    assert resp.status_code == 201
    assert resp.get_json()["updated_account_balance"] == -12.0
