"""User service layer."""

from __future__ import annotations

from typing import Optional

from perfin.core.auth.password import check_password_policy, hash_password
from perfin.core.users.models import User
from perfin.extensions import db


def get_user(user_id: int) -> Optional[User]:
    return db.session.get(User, user_id)


def get_user_by_email(email: str) -> Optional[User]:
    return User.query.filter_by(email=email.strip().lower()).first()


def ensure_owner(email: str, password: str, full_name: str | None = None) -> User:
    """Create the owner account, or reset its password if it already exists."""
    check_password_policy(password)
    email = email.strip().lower()
    user = get_user_by_email(email)
    if user is None:
        user = User(email=email, password_hash=hash_password(password), full_name=full_name)
        db.session.add(user)
    else:
        user.password_hash = hash_password(password)
        if full_name is not None:
            user.full_name = full_name
        user.is_active = True
    db.session.commit()
    return user
