"""
Organisation service: organisation records and the membership join table.
"""

from __future__ import annotations

import uuid
from typing import Optional

import structlog
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.errors import NotFound, StoreError
from app.models.membership import Membership
from app.models.organisation import Organisation
from app.models.user import User
from app.services.users import find_user_by_id, parse_id
from orgauth_shared.schemas.organisations import OrgCreateRequest

log = structlog.get_logger()


async def create_organisation(
    req: OrgCreateRequest, session: AsyncSession
) -> Organisation:
    org = Organisation(name=req.name, description=req.description)
    session.add(org)
    try:
        await session.flush()
    except SQLAlchemyError as exc:
        raise StoreError(str(exc)) from exc

    log.info("org.created", org_id=str(org.id), name=org.name)
    return org


async def find_organisation_by_id(
    org_id: str | uuid.UUID, session: AsyncSession
) -> Optional[Organisation]:
    oid = parse_id(org_id)
    if oid is None:
        return None
    try:
        result = await session.execute(
            select(Organisation).where(Organisation.id == oid)
        )
    except SQLAlchemyError as exc:
        raise StoreError(str(exc)) from exc
    return result.scalar_one_or_none()


async def list_organisations(session: AsyncSession) -> list[Organisation]:
    """All organisations, oldest first."""
    try:
        result = await session.execute(
            select(Organisation).order_by(Organisation.created_at, Organisation.id)
        )
    except SQLAlchemyError as exc:
        raise StoreError(str(exc)) from exc
    return list(result.scalars().all())


async def add_membership(
    user_id: str | uuid.UUID, org_id: str | uuid.UUID, session: AsyncSession
) -> bool:
    """Link a user to an organisation.

    Returns True when a new membership was created and False when the user was
    already a member. Raises NotFound if either side does not exist.
    """
    user = await find_user_by_id(user_id, session)
    org = await find_organisation_by_id(org_id, session)
    if not user or not org:
        raise NotFound("User or Organisation not found")

    # Rollback expires loaded instances, so keep plain ids.
    uid, oid = user.id, org.id
    try:
        result = await session.execute(
            select(Membership).where(
                Membership.user_id == uid, Membership.org_id == oid
            )
        )
        if result.scalar_one_or_none():
            log.info("org.member_exists", org_id=str(oid), user_id=str(uid))
            return False

        session.add(Membership(user_id=uid, org_id=oid))
        await session.flush()
    except IntegrityError:
        # A concurrent request inserted the same link first.
        await session.rollback()
        log.info("org.member_exists", org_id=str(oid), user_id=str(uid))
        return False
    except SQLAlchemyError as exc:
        raise StoreError(str(exc)) from exc

    log.info("org.member_added", org_id=str(oid), user_id=str(uid))
    return True


async def list_organisation_members(
    org_id: uuid.UUID, session: AsyncSession
) -> list[User]:
    try:
        result = await session.execute(
            select(User)
            .join(Membership, Membership.user_id == User.id)
            .where(Membership.org_id == org_id)
            .order_by(Membership.created_at)
        )
    except SQLAlchemyError as exc:
        raise StoreError(str(exc)) from exc
    return list(result.scalars().all())


async def list_user_organisations(
    user_id: uuid.UUID, session: AsyncSession
) -> list[Organisation]:
    try:
        result = await session.execute(
            select(Organisation)
            .join(Membership, Membership.org_id == Organisation.id)
            .where(Membership.user_id == user_id)
            .order_by(Membership.created_at)
        )
    except SQLAlchemyError as exc:
        raise StoreError(str(exc)) from exc
    return list(result.scalars().all())
