"""
Authentication endpoints.

POST /auth/register Create a user and return a bearer token
POST /auth/login    Exchange email/password for a bearer token
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from app.core.context import AppContext, get_context
from app.core.database import commit, get_session
from app.core.errors import AuthenticationFailed, BadRequest, StoreError
from app.core.validation import validated_body
from app.services import users as user_service
from orgauth_shared.schemas.common import success
from orgauth_shared.schemas.users import (
    AuthData,
    LoginRequest,
    RegisterRequest,
    UserResponse,
)

log = structlog.get_logger()
router = APIRouter()


@router.post("/register", status_code=201)
async def register(
    body: dict = Depends(validated_body("register")),
    ctx: AppContext = Depends(get_context),
    session: AsyncSession = Depends(get_session),
):
    """Register a new user with email/password."""
    req = RegisterRequest.model_validate(body)
    password_hash = await run_in_threadpool(ctx.hasher.hash, req.password)

    try:
        user = await user_service.create_user(req, password_hash, session)
        await commit(session)
    except StoreError as exc:
        log.warning("user.register_failure", email=req.email, error=str(exc))
        raise BadRequest("Registration unsuccessful", error=str(exc))

    token = ctx.tokens.issue(user.id)
    log.info("user.registered", user_id=str(user.id), email=user.email)
    data = AuthData(access_token=token, user=UserResponse.model_validate(user))
    return JSONResponse(
        status_code=201,
        content=success("Registration successful", data.to_wire()),
    )


@router.post("/login")
async def login(
    body: dict = Depends(validated_body("login")),
    ctx: AppContext = Depends(get_context),
    session: AsyncSession = Depends(get_session),
):
    """Authenticate with email/password and receive a bearer token."""
    req = LoginRequest.model_validate(body)

    try:
        user = await user_service.find_user_by_email(req.email, session)
    except StoreError as exc:
        log.warning("auth.login_error", email=req.email, error=str(exc))
        raise BadRequest("Login unsuccessful", error=str(exc))

    if not user:
        await run_in_threadpool(ctx.hasher.verify_dummy, req.password)
        log.warning("auth.login_failure", email=req.email, reason="unknown_email")
        raise AuthenticationFailed()

    if not await run_in_threadpool(ctx.hasher.verify, req.password, user.password_hash):
        log.warning("auth.login_failure", email=req.email, reason="bad_password")
        raise AuthenticationFailed()

    token = ctx.tokens.issue(user.id)
    log.info("auth.login_success", user_id=str(user.id), email=user.email)
    data = AuthData(access_token=token, user=UserResponse.model_validate(user))
    return success("Login successful", data.to_wire())
