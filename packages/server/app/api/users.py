"""
User endpoints.

GET /api/users/{userId}                Get a user's profile
GET /api/users/{userId}/organisations  Organisations the user belongs to
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import TokenClaims, require_bearer
from app.core.database import get_session
from app.core.errors import NotFound, ServerError, StoreError
from app.services import organisations as org_service
from app.services import users as user_service
from orgauth_shared.schemas.common import success
from orgauth_shared.schemas.organisations import OrgListData, OrgResponse
from orgauth_shared.schemas.users import UserResponse

log = structlog.get_logger()
router = APIRouter()


@router.get("/{userId}")
async def get_user(
    userId: str,
    claims: TokenClaims = Depends(require_bearer),
    session: AsyncSession = Depends(get_session),
):
    """Get a user's profile. Any authenticated caller may read any user."""
    try:
        user = await user_service.find_user_by_id(userId, session)
    except StoreError as exc:
        log.error("user.fetch_error", user_id=userId, error=str(exc))
        raise ServerError()

    if not user:
        raise NotFound("User not found")

    return success("User retrieved successfully", UserResponse.model_validate(user).to_wire())


@router.get("/{userId}/organisations")
async def list_user_organisations(
    userId: str,
    claims: TokenClaims = Depends(require_bearer),
    session: AsyncSession = Depends(get_session),
):
    """List the organisations a user is a member of."""
    try:
        user = await user_service.find_user_by_id(userId, session)
        if not user:
            raise NotFound("User not found")
        orgs = await org_service.list_user_organisations(user.id, session)
    except StoreError as exc:
        log.error("user.organisations_fetch_error", user_id=userId, error=str(exc))
        raise ServerError(error=str(exc))

    data = OrgListData(organisations=[OrgResponse.model_validate(o) for o in orgs])
    return success("User organisations retrieved successfully", data.to_wire())
