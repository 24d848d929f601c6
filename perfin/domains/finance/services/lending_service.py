"""Lending/borrowing tracker services.

Records here are informal IOUs and never touch account balances.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Tuple

from sqlalchemy import or_

from perfin.core.utils.unit_of_work import atomic
from perfin.domains.finance.errors import InvalidInputError, NotFoundError
from perfin.domains.finance.models.lending_models import LENDING_STATUSES, LENDING_TYPES, LendingRecord
from perfin.domains.finance.services.ledger_service import normalize_amount, normalize_date
from perfin.extensions import db

EDITABLE_FIELDS = ("type", "person", "amount", "date", "due_date", "status", "notes")


def _choice(raw: Any, allowed: Tuple[str, ...], field: str) -> str:
    value = str(raw or "").strip().lower()
    if value not in allowed:
        raise InvalidInputError(f"{field} must be one of: {', '.join(allowed)}.")
    return value


def _person(raw: Any) -> str:
    person = str(raw or "").strip()
    if not person:
        raise InvalidInputError("person is required.")
    return person


def _normalize(fields: Dict[str, Any]) -> Dict[str, Any]:
    cleaners = {
        "type": lambda v: _choice(v, LENDING_TYPES, "type"),
        "person": _person,
        "amount": normalize_amount,
        "date": lambda v: normalize_date(v, "date"),
        "due_date": lambda v: normalize_date(v, "due_date"),
        "status": lambda v: _choice(v, LENDING_STATUSES, "status"),
        "notes": lambda v: str(v).strip() or None,
    }
    return {key: cleaners[key](fields[key]) for key in EDITABLE_FIELDS if fields.get(key) is not None}


def _get(user_id: int, record_id: int) -> LendingRecord:
    record = LendingRecord.query.filter_by(id=record_id, user_id=user_id).first()
    if record is None:
        raise NotFoundError("Entry not found.")
    return record


def list_records(
    user_id: int,
    *,
    status: str | None = None,
    record_type: str | None = None,
    search: str | None = None,
) -> List[LendingRecord]:
    query = LendingRecord.query.filter_by(user_id=user_id)
    if status:
        query = query.filter(LendingRecord.status == status)
    if record_type:
        query = query.filter(LendingRecord.type == record_type)
    if search:
        pattern = f"%{search.strip().lower()}%"
        query = query.filter(
            or_(db.func.lower(LendingRecord.person).like(pattern), db.func.lower(LendingRecord.notes).like(pattern))
        )
    return query.order_by(LendingRecord.date.desc(), LendingRecord.created_at.desc(), LendingRecord.id.desc()).all()


def get_record(user_id: int, record_id: int) -> LendingRecord:
    return _get(user_id, record_id)


def create_record(user_id: int, **fields) -> LendingRecord:
    missing = [key for key in ("type", "person", "amount", "date") if fields.get(key) in (None, "")]
    if missing:
        raise InvalidInputError(f"Missing required fields: {', '.join(missing)}.")
    values = _normalize(fields)
    values.setdefault("status", "outstanding")
    with atomic() as session:
        record = LendingRecord(user_id=user_id, **values)
        session.add(record)
        session.flush()
    return record


def update_record(user_id: int, record_id: int, **fields) -> LendingRecord:
    """Apply only the supplied fields; None leaves a field as stored."""
    values = _normalize(fields)
    with atomic():
        record = _get(user_id, record_id)
        for key, value in values.items():
            setattr(record, key, value)
    return record


def delete_record(user_id: int, record_id: int) -> int:
    with atomic() as session:
        session.delete(_get(user_id, record_id))
    return record_id


def person_summary(user_id: int) -> List[Dict[str, Any]]:
    """Per-counterparty totals; positive ``net`` means the owner owes that person."""
    totals: Dict[str, Dict[str, Decimal]] = {}
    for record in LendingRecord.query.filter_by(user_id=user_id).all():
        row = totals.setdefault(record.person, {"lent": Decimal("0"), "borrowed": Decimal("0")})
        row[record.type] += Decimal(str(record.amount))
    summary = [
        {
            "person": person,
            "lent": float(row["lent"]),
            "borrowed": float(row["borrowed"]),
            "net": float(row["borrowed"] - row["lent"]),
        }
        for person, row in totals.items()
    ]
    summary.sort(key=lambda item: (-abs(item["net"]), item["person"]))
    return summary
