"""Typed schemas for user IO."""

from __future__ import annotations

from typing import Optional, TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from perfin.core.users.models import User


class LoginRequest(BaseModel):
    password: str = Field(min_length=1)


class UserResponse(BaseModel):
    # Response should not re-validate persisted emails (local domains, etc.)
    id: int
    email: str
    full_name: Optional[str] = None
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


def serialize_user(user: "User") -> UserResponse:
    return UserResponse.model_validate(user)
