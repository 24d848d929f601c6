"""Pydantic schemas for finance domain."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Literal, Optional

from pydantic import AliasChoices, BaseModel, Field

Direction = Literal["income", "expense"]


class AccountCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    account_type: str = Field(
        min_length=1, max_length=50, validation_alias=AliasChoices("account_type", "type")
    )
    currency: Optional[str] = Field(default=None, min_length=1, max_length=10)
    balance: Optional[Decimal] = Field(default=None, max_digits=15, decimal_places=2)


class AccountUpdate(BaseModel):
    """Partial update; ``balance`` here is an administrative edit."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    account_type: Optional[str] = Field(
        default=None, min_length=1, max_length=50, validation_alias=AliasChoices("account_type", "type")
    )
    currency: Optional[str] = Field(default=None, min_length=1, max_length=10)
    balance: Optional[Decimal] = Field(default=None, max_digits=15, decimal_places=2)


class TransactionCreate(BaseModel):
    account_id: int = Field(gt=0)
    amount: Decimal = Field(gt=0, max_digits=15, decimal_places=2)
    direction: Direction = Field(validation_alias=AliasChoices("direction", "type"))
    description: str = Field(min_length=1)
    category: str = Field(min_length=1, max_length=255)
    transaction_date: dt.date


class TransactionUpdate(BaseModel):
    account_id: Optional[int] = Field(default=None, gt=0)
    amount: Optional[Decimal] = Field(default=None, max_digits=15, decimal_places=2)
    direction: Optional[Direction] = Field(default=None, validation_alias=AliasChoices("direction", "type"))
    description: Optional[str] = None
    category: Optional[str] = Field(default=None, max_length=255)
    transaction_date: Optional[dt.date] = None


class TransactionFilters(BaseModel):
    """Query-string filters for GET /transactions."""

    account_id: Optional[int] = None
    direction: Optional[Direction] = Field(default=None, validation_alias=AliasChoices("direction", "type"))
    category: Optional[str] = None
    date_from: Optional[dt.date] = None
    date_to: Optional[dt.date] = None


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    type: str = Field(min_length=1, max_length=50)


class LendingCreate(BaseModel):
    type: Literal["lent", "borrowed"]
    person: str = Field(min_length=1, max_length=255)
    amount: Decimal = Field(gt=0, max_digits=15, decimal_places=2)
    date: dt.date
    due_date: Optional[dt.date] = None
    status: Literal["outstanding", "paid", "overdue"] = "outstanding"
    notes: Optional[str] = None


class LendingUpdate(BaseModel):
    type: Optional[Literal["lent", "borrowed"]] = None
    person: Optional[str] = Field(default=None, min_length=1, max_length=255)
    amount: Optional[Decimal] = Field(default=None, gt=0, max_digits=15, decimal_places=2)
    date: Optional[dt.date] = None
    due_date: Optional[dt.date] = None
    status: Optional[Literal["outstanding", "paid", "overdue"]] = None
    notes: Optional[str] = None
