"""
User service: persistence for user records and credential lookup.
"""

from __future__ import annotations

import uuid
from typing import Optional

import structlog
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.errors import DuplicateEmail, StoreError
from app.models.user import User
from orgauth_shared.schemas.users import RegisterRequest

log = structlog.get_logger()


def parse_id(value: str | uuid.UUID) -> Optional[uuid.UUID]:
    """Parse a client-supplied id; anything that is not a UUID is None."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


async def create_user(
    req: RegisterRequest, password_hash: str, session: AsyncSession
) -> User:
    """Insert a user. Raises DuplicateEmail if the email is taken."""
    user = User(
        first_name=req.first_name,
        last_name=req.last_name,
        email=req.email,
        password_hash=password_hash,
        phone=req.phone,
    )
    session.add(user)
    try:
        await session.flush()
    except IntegrityError as exc:
        raise DuplicateEmail(str(exc.orig)) from exc
    except SQLAlchemyError as exc:
        raise StoreError(str(exc)) from exc

    log.info("user.created", user_id=str(user.id), email=user.email)
    return user


async def find_user_by_email(email: str, session: AsyncSession) -> Optional[User]:
    try:
        result = await session.execute(select(User).where(User.email == email))
    except SQLAlchemyError as exc:
        raise StoreError(str(exc)) from exc
    return result.scalar_one_or_none()


async def find_user_by_id(
    user_id: str | uuid.UUID, session: AsyncSession
) -> Optional[User]:
    uid = parse_id(user_id)
    if uid is None:
        return None
    try:
        result = await session.execute(select(User).where(User.id == uid))
    except SQLAlchemyError as exc:
        raise StoreError(str(exc)) from exc
    return result.scalar_one_or_none()
