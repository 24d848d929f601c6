from __future__ import annotations

from decimal import Decimal

import pytest

pytestmark = pytest.mark.integration

from sqlalchemy import select

from perfin.domains.finance.models.ledger_models import Account
from perfin.extensions import db


def _entry(client, headers, **overrides):
    payload = {"type": "lent", "person": "Asha", "amount": 500, "date": "2024-04-01"}
    payload.update(overrides)
    resp = client.post("/api/finance/lending-borrowing", json=payload, headers=headers)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()["entry"]


def test_create_defaults_to_outstanding(client, auth_headers):
    entry = _entry(client, auth_headers, due_date="2024-05-01", notes="Train tickets")
    assert entry["status"] == "outstanding"
    assert entry["amount"] == 500.0
    assert entry["due_date"] == "2024-05-01"
    assert entry["notes"] == "Train tickets"


def test_create_requires_core_fields(client, auth_headers):
    resp = client.post(
        "/api/finance/lending-borrowing", json={"type": "lent", "amount": 5, "date": "2024-01-01"}, headers=auth_headers
    )
    assert resp.status_code == 400


def test_list_orders_newest_first_and_filters(client, auth_headers):
    _entry(client, auth_headers, person="Asha", date="2024-01-01")
    _entry(client, auth_headers, person="Ben", type="borrowed", date="2024-03-01", status="paid")
    _entry(client, auth_headers, person="Chitra", date="2024-02-01", notes="asha's friend")

    resp = client.get("/api/finance/lending-borrowing", headers=auth_headers)
    assert [e["person"] for e in resp.get_json()["entries"]] == ["Ben", "Chitra", "Asha"]

    resp = client.get("/api/finance/lending-borrowing?status=paid", headers=auth_headers)
    assert [e["person"] for e in resp.get_json()["entries"]] == ["Ben"]

    resp = client.get("/api/finance/lending-borrowing?search=ASHA", headers=auth_headers)
    assert {e["person"] for e in resp.get_json()["entries"]} == {"Asha", "Chitra"}


def test_partial_update_only_touches_supplied_fields(client, auth_headers):
    entry = _entry(client, auth_headers, notes="keep me")

    resp = client.put(
        f"/api/finance/lending-borrowing/{entry['id']}", json={"status": "paid"}, headers=auth_headers
    )

    assert resp.status_code == 200
    updated = resp.get_json()["entry"]
    assert updated["status"] == "paid"
    assert updated["notes"] == "keep me"
    assert updated["amount"] == 500.0
    assert client.put("/api/finance/lending-borrowing/999", json={"status": "paid"}, headers=auth_headers).status_code == 404


def test_invalid_status_is_400(client, auth_headers):
    entry = _entry(client, auth_headers)
    resp = client.patch(
        f"/api/finance/lending-borrowing/{entry['id']}", json={"status": "forgiven"}, headers=auth_headers
    )
    assert resp.status_code == 400


def test_delete_entry(client, auth_headers):
    entry = _entry(client, auth_headers)
    resp = client.delete(f"/api/finance/lending-borrowing/{entry['id']}", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.get_json()["id"] == entry["id"]
    assert client.get(f"/api/finance/lending-borrowing/{entry['id']}", headers=auth_headers).status_code == 404


def test_summary_nets_per_person(client, auth_headers):
    _entry(client, auth_headers, person="Asha", amount=500)
    _entry(client, auth_headers, person="Asha", type="borrowed", amount=200)
    _entry(client, auth_headers, person="Ben", type="borrowed", amount=1000)
    _entry(client, auth_headers, person="Chitra", amount=50)

    resp = client.get("/api/finance/lending-borrowing/summary", headers=auth_headers)

    assert resp.get_json()["summary"] == [
        {"person": "Ben", "lent": 0.0, "borrowed": 1000.0, "net": 1000.0},
        {"person": "Asha", "lent": 500.0, "borrowed": 200.0, "net": -300.0},
        {"person": "Chitra", "lent": 50.0, "borrowed": 0.0, "net": -50.0},
    ]


def test_lending_never_touches_account_balances(client, auth_headers, make_account):
    account = make_account(balance="10")
    _entry(client, auth_headers, amount=999)
    assert db.session.execute(select(Account.balance).where(Account.id == account.id)).scalar_one() == Decimal("10.00")
