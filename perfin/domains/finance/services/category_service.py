"""Category suggestions for transactions."""

from __future__ import annotations

from typing import List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from perfin.core.utils.unit_of_work import atomic
from perfin.domains.finance.errors import ConflictError, InvalidInputError, NotFoundError
from perfin.domains.finance.models.category_models import CATEGORY_TYPES, Category
from perfin.extensions import db


def list_categories(user_id: int, category_type: str | None = None) -> List[Category]:
    stmt = select(Category).where(Category.user_id == user_id)
    if category_type:
        stmt = stmt.where(Category.type == category_type.strip().lower())
    return list(db.session.execute(stmt.order_by(Category.name.asc(), Category.id.asc())).scalars())


def create_category(user_id: int, *, name: str, category_type: str) -> Category:
    name = (name or "").strip()
    kind = (category_type or "").strip().lower()
    if not name:
        raise InvalidInputError("Category name is required.")
    if kind not in CATEGORY_TYPES:
        raise InvalidInputError('Type must be "income" or "expense".')

    with atomic() as session:
        duplicate = session.execute(
            select(Category.id).where(Category.user_id == user_id, Category.name == name, Category.type == kind)
        ).first()
        if duplicate:
            raise ConflictError("Category already exists.")
        category = Category(user_id=user_id, name=name, type=kind)
        session.add(category)
        try:
            session.flush()
        except IntegrityError:
            raise ConflictError("Category already exists.")
    return category


def delete_category(user_id: int, category_id: int) -> Category:
    with atomic() as session:
        category = session.execute(
            select(Category).where(Category.id == category_id, Category.user_id == user_id)
        ).scalar_one_or_none()
        if category is None:
            raise NotFoundError("Category not found.")
        session.delete(category)
    return category
