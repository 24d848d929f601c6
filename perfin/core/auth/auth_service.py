"""Authentication service layer.

Perfin is single-user: the login gate checks a password against the
configured owner and hands out a JWT whose identity scopes every finance
query.
"""

from __future__ import annotations

import logging
from typing import Optional

from flask import current_app
from flask_jwt_extended import create_access_token

from perfin.core.auth.password import verify_password
from perfin.core.users.models import User
from perfin.core.users.services import get_user_by_email

logger = logging.getLogger(__name__)


def authenticate_owner(password: str) -> Optional[User]:
    """Return the owner if the password matches."""
    owner = get_user_by_email(current_app.config["OWNER_EMAIL"])
    if owner is None:
        logger.warning("Login attempted but no owner account exists; run `flask seed-owner`")
        return None
    if not owner.is_active or not verify_password(password, owner.password_hash):
        return None
    return owner


def issue_tokens(user: User) -> dict[str, str]:
    """Create an access token for the owner."""
    return {"access_token": create_access_token(identity=str(user.id))}
