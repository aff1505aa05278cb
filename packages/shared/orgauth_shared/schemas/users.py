"""User and authentication schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, Field

from .common import CamelModel, TextInputModel


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class RegisterRequest(TextInputModel):
    first_name: str
    last_name: str
    email: str
    password: str
    phone: Optional[str] = None


class LoginRequest(TextInputModel):
    email: str
    password: str


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class UserResponse(CamelModel):
    """Public view of a user. The password hash is never part of it."""
    user_id: uuid.UUID = Field(
        validation_alias=AliasChoices("id", "userId", "user_id"),
        serialization_alias="userId",
    )
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AuthData(CamelModel):
    """Payload of a successful register or login."""
    access_token: str
    user: UserResponse


class UserListData(CamelModel):
    users: List[UserResponse]
