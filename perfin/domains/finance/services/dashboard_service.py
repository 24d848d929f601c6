"""Finance dashboard aggregations."""

from __future__ import annotations

import datetime as dt
from collections import defaultdict
from decimal import Decimal
from typing import Dict, List

from perfin.domains.finance.models.ledger_models import DIRECTION_INCOME, Account, Transaction
from perfin.domains.finance.services.ledger_service import delta

ZERO = Decimal("0")


def _money(value: Decimal) -> float:
    return round(float(value), 2)


def get_dashboard(user_id: int, as_of: dt.date | None = None) -> dict:
    as_of = as_of or dt.date.today()

    accounts: List[Account] = (
        Account.query.filter_by(user_id=user_id).order_by(Account.created_at.asc(), Account.id.asc()).all()
    )
    net_worth = sum((Decimal(str(acct.balance)) for acct in accounts), ZERO)

    txns: List[Transaction] = (
        Transaction.query.filter_by(user_id=user_id)
        .order_by(Transaction.transaction_date.asc(), Transaction.id.asc())
        .all()
    )

    total_income = ZERO
    total_expense = ZERO
    month_income = ZERO
    month_expense = ZERO
    by_category: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    by_month: Dict[str, Dict[str, Decimal]] = defaultdict(lambda: {"income": ZERO, "expense": ZERO})

    for t in txns:
        amount = Decimal(str(t.amount))
        bucket = "income" if t.direction == DIRECTION_INCOME else "expense"
        if bucket == "income":
            total_income += amount
        else:
            total_expense += amount
            by_category[t.category] += amount
        by_month[t.transaction_date.strftime("%Y-%m")][bucket] += amount
        if (t.transaction_date.year, t.transaction_date.month) == (as_of.year, as_of.month):
            if bucket == "income":
                month_income += amount
            else:
                month_expense += amount

    # Running balance over months, oldest first
    monthly: List[dict] = []
    cumulative = ZERO
    for month in sorted(by_month):
        income = by_month[month]["income"]
        expense = by_month[month]["expense"]
        cumulative += income - expense
        monthly.append(
            {
                "month": month,
                "income": _money(income),
                "expense": _money(expense),
                "monthly_balance": _money(income - expense),
                "cumulative_balance": _money(cumulative),
            }
        )

    return {
        "net_worth": _money(net_worth),
        "accounts": [
            {"account_id": acct.id, "name": acct.name, "account_type": acct.account_type, "balance": _money(acct.balance)}
            for acct in accounts
        ],
        "totals": {
            "income": _money(total_income),
            "expense": _money(total_expense),
            "net_flow": _money(sum((delta(t.direction, Decimal(str(t.amount))) for t in txns), ZERO)),
        },
        "expense_by_category": [
            {"category": name, "amount": _money(amount)}
            for name, amount in sorted(by_category.items(), key=lambda item: (-item[1], item[0]))
        ],
        "current_month": {
            "month": as_of.strftime("%Y-%m"),
            "income": _money(month_income),
            "expense": _money(month_expense),
            "balance": _money(month_income - month_expense),
        },
        "monthly": monthly,
        "recent_transactions": [
            {
                "id": t.id,
                "account_id": t.account_id,
                "amount": _money(t.amount),
                "type": t.direction,
                "description": t.description,
                "transaction_date": t.transaction_date.isoformat(),
            }
            for t in reversed(txns[-5:])
        ],
    }
