from __future__ import annotations

from decimal import Decimal

import pytest

pytestmark = pytest.mark.integration

from sqlalchemy import delete, select

from perfin.domains.finance.models.ledger_models import Account, Transaction
from perfin.extensions import db


def _payload(account_id: int, **overrides) -> dict:
    payload = {
        "account_id": account_id,
        "amount": 100,
        "type": "income",
        "description": "Salary",
        "category": "Pay",
        "transaction_date": "2024-03-01",
    }
    payload.update(overrides)
    return payload


def _create(client, headers, account_id, **overrides):
    resp = client.post("/api/finance/transactions", json=_payload(account_id, **overrides), headers=headers)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()


def test_create_returns_transaction_and_authoritative_balance(client, auth_headers, make_account):
    account = make_account(balance="50")

    body = _create(client, auth_headers, account.id)

    assert body["ok"] is True
    assert body["updated_account_balance"] == 150.0
    assert body["transaction"]["type"] == "income"
    assert body["transaction"]["amount"] == 100.0
    assert body["transaction"]["account_id"] == account.id


def test_create_accepts_direction_key(client, auth_headers, make_account):
    account = make_account(balance="50")
    payload = _payload(account.id, amount="30")
    payload.pop("type")
    payload["direction"] = "expense"

    resp = client.post("/api/finance/transactions", json=payload, headers=auth_headers)

    assert resp.status_code == 201
    assert resp.get_json()["updated_account_balance"] == 20.0


@pytest.mark.parametrize(
    "overrides",
    [
        {"amount": 0},
        {"amount": -3},
        {"type": "transfer"},
        {"description": ""},
        {"transaction_date": "not-a-date"},
    ],
)
def test_create_invalid_payload_is_400(client, auth_headers, make_account, overrides):
    account = make_account()
    resp = client.post("/api/finance/transactions", json=_payload(account.id, **overrides), headers=auth_headers)
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "validation_error"
    assert Transaction.query.count() == 0


def test_create_blank_category_is_rejected_by_ledger(client, auth_headers, make_account):
    account = make_account()
    resp = client.post(
        "/api/finance/transactions", json=_payload(account.id, category="   "), headers=auth_headers
    )
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["error"] == "validation_error"
    assert "category" in body["message"]


def test_create_on_foreign_account_is_404(client, auth_headers, stranger, make_account):
    theirs = make_account(name="Theirs", user=stranger)
    resp = client.post("/api/finance/transactions", json=_payload(theirs.id), headers=auth_headers)
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "not_found"
    assert Transaction.query.count() == 0


def test_requires_jwt(client, make_account):
    account = make_account()
    resp = client.post("/api/finance/transactions", json=_payload(account.id))
    assert resp.status_code == 401


def test_list_filters_and_paginates(client, auth_headers, make_account):
    cash = make_account(name="Cash")
    bank = make_account(name="Bank")
    _create(client, auth_headers, cash.id, transaction_date="2024-01-10")
    _create(client, auth_headers, cash.id, type="expense", amount=5, category="Food", transaction_date="2024-02-10")
    _create(client, auth_headers, bank.id, type="expense", amount=7, category="Food", transaction_date="2024-03-10")

    resp = client.get("/api/finance/transactions", headers=auth_headers)
    body = resp.get_json()
    assert resp.status_code == 200
    assert body["total"] == 3
    assert [t["transaction_date"] for t in body["transactions"]] == ["2024-03-10", "2024-02-10", "2024-01-10"]

    resp = client.get("/api/finance/transactions?type=expense&category=Food", headers=auth_headers)
    assert resp.get_json()["total"] == 2

    resp = client.get(f"/api/finance/transactions?account_id={cash.id}&date_from=2024-02-01", headers=auth_headers)
    assert [t["category"] for t in resp.get_json()["transactions"]] == ["Food"]

    resp = client.get("/api/finance/transactions?per_page=2&page=2", headers=auth_headers)
    body = resp.get_json()
    assert body["pages"] == 2
    assert len(body["transactions"]) == 1


def test_list_rejects_bad_filter(client, auth_headers):
    resp = client.get("/api/finance/transactions?date_from=yesterday", headers=auth_headers)
    assert resp.status_code == 400


def test_get_single_transaction(client, auth_headers, make_account):
    account = make_account()
    txn_id = _create(client, auth_headers, account.id)["transaction"]["id"]

    resp = client.get(f"/api/finance/transactions/{txn_id}", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.get_json()["transaction"]["id"] == txn_id

    assert client.get("/api/finance/transactions/9999", headers=auth_headers).status_code == 404


def test_update_moves_transaction_between_accounts(client, auth_headers, make_account):
    account_a = make_account(name="A", balance="140")
    account_b = make_account(name="B", balance="50")
    txn_id = _create(client, auth_headers, account_a.id, type="expense", amount=20)["transaction"]["id"]

    resp = client.put(
        f"/api/finance/transactions/{txn_id}", json={"account_id": account_b.id}, headers=auth_headers
    )

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["updated_account_balance"] == 30.0
    assert body["transaction"]["account_id"] == account_b.id
    balances = dict(db.session.execute(select(Account.name, Account.balance)).all())
    assert balances == {"A": Decimal("140.00"), "B": Decimal("30.00")}


def test_update_with_non_positive_amount_is_400_and_rolled_back(client, auth_headers, make_account):
    account = make_account(balance="50")
    txn_id = _create(client, auth_headers, account.id)["transaction"]["id"]

    resp = client.patch(f"/api/finance/transactions/{txn_id}", json={"amount": 0}, headers=auth_headers)

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "validation_error"
    assert db.session.execute(select(Account.balance).where(Account.id == account.id)).scalar_one() == Decimal("150.00")


def test_update_missing_transaction_is_404(client, auth_headers):
    resp = client.patch("/api/finance/transactions/31337", json={"amount": 5}, headers=auth_headers)
    assert resp.status_code == 404


def test_delete_returns_restored_balance(client, auth_headers, make_account):
    account = make_account(balance="100")
    txn_id = _create(client, auth_headers, account.id, type="expense", amount=25)["transaction"]["id"]

    resp = client.delete(f"/api/finance/transactions/{txn_id}", headers=auth_headers)

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["id"] == txn_id
    assert body["updated_account_balance"] == 100.0
    assert client.delete(f"/api/finance/transactions/{txn_id}", headers=auth_headers).status_code == 404


def test_delete_with_dangling_account_is_500_data_integrity(client, auth_headers, make_account):
    account = make_account(balance="100")
    txn_id = _create(client, auth_headers, account.id, type="expense", amount=25)["transaction"]["id"]
    db.session.execute(delete(Account).where(Account.id == account.id))
    db.session.commit()

    resp = client.delete(f"/api/finance/transactions/{txn_id}", headers=auth_headers)

    assert resp.status_code == 500
    assert resp.get_json()["error"] == "data_integrity"
    assert db.session.get(Transaction, txn_id) is not None


def test_mutations_require_csrf_token_when_enabled(app, client, auth_headers, make_account):
    account = make_account()
    app.config["WTF_CSRF_ENABLED"] = True

    resp = client.post("/api/finance/transactions", json=_payload(account.id), headers=auth_headers)

    assert resp.status_code == 403
    assert resp.get_json()["error"] == "csrf_failed"
