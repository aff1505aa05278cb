"""
Organisation API endpoints.

POST /api/organisations                  Create an organisation
GET  /api/organisations                  List all organisations
GET  /api/organisations/{orgId}          Get one organisation
POST /api/organisations/{orgId}/users    Add a user to an organisation
GET  /api/organisations/{orgId}/users    List an organisation's members

The membership add route takes no bearer token, unlike its siblings. That is
the behaviour existing clients rely on.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import TokenClaims, require_bearer
from app.core.database import commit, get_session
from app.core.errors import BadRequest, NotFound, ServerError, StoreError
from app.core.validation import validated_body
from app.services import organisations as org_service
from orgauth_shared.schemas.common import success
from orgauth_shared.schemas.organisations import (
    MemberAddRequest,
    OrgCreateRequest,
    OrgListData,
    OrgResponse,
)
from orgauth_shared.schemas.users import UserListData, UserResponse

log = structlog.get_logger()
router = APIRouter()


@router.post("", status_code=201)
async def create_organisation(
    body: dict = Depends(validated_body("create_organisation")),
    session: AsyncSession = Depends(get_session),
):
    req = OrgCreateRequest.model_validate(body)
    try:
        org = await org_service.create_organisation(req, session)
        await commit(session)
    except StoreError as exc:
        log.warning("org.create_failure", name=req.name, error=str(exc))
        raise BadRequest("Organisation creation unsuccessful", error=str(exc))

    return JSONResponse(
        status_code=201,
        content=success(
            "Organisation created successfully", OrgResponse.model_validate(org).to_wire()
        ),
    )


@router.get("")
async def list_organisations(
    claims: TokenClaims = Depends(require_bearer),
    session: AsyncSession = Depends(get_session),
):
    try:
        orgs = await org_service.list_organisations(session)
    except StoreError as exc:
        log.error("org.list_error", error=str(exc))
        raise ServerError(error=str(exc))

    data = OrgListData(organisations=[OrgResponse.model_validate(o) for o in orgs])
    return success("Organisations retrieved successfully", data.to_wire())


@router.get("/{orgId}")
async def get_organisation(
    orgId: str,
    claims: TokenClaims = Depends(require_bearer),
    session: AsyncSession = Depends(get_session),
):
    try:
        org = await org_service.find_organisation_by_id(orgId, session)
    except StoreError as exc:
        log.error("org.fetch_error", org_id=orgId, error=str(exc))
        raise ServerError()

    if not org:
        raise NotFound("Organisation not found")

    return success("Organisation retrieved successfully", OrgResponse.model_validate(org).to_wire())


@router.post("/{orgId}/users")
async def add_user_to_organisation(
    orgId: str,
    body: dict = Depends(validated_body("add_member")),
    session: AsyncSession = Depends(get_session),
):
    """Add a user to an organisation. Adding an existing member is a no-op."""
    req = MemberAddRequest.model_validate(body)
    try:
        await org_service.add_membership(req.user_id, orgId, session)
        await commit(session)
    except StoreError as exc:
        log.warning("org.member_add_failure", org_id=orgId, user_id=req.user_id, error=str(exc))
        raise BadRequest("Failed to add user to organisation", error=str(exc))

    return success("User added to organisation successfully")


@router.get("/{orgId}/users")
async def list_organisation_members(
    orgId: str,
    claims: TokenClaims = Depends(require_bearer),
    session: AsyncSession = Depends(get_session),
):
    try:
        org = await org_service.find_organisation_by_id(orgId, session)
        if not org:
            raise NotFound("Organisation not found")
        members = await org_service.list_organisation_members(org.id, session)
    except StoreError as exc:
        log.error("org.members_fetch_error", org_id=orgId, error=str(exc))
        raise ServerError(error=str(exc))

    data = UserListData(users=[UserResponse.model_validate(u) for u in members])
    return success("Organisation members retrieved successfully", data.to_wire())
