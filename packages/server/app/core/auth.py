"""
Authentication and Authorization for Orgauth.

Supports:
- Password hashing (bcrypt, per-hash random salt)
- Bearer token issue/verify (HS256 JWT, fixed lifetime, no revocation)
- The ``require_bearer`` dependency that gates protected routes
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
import structlog
from fastapi import Request

from app.core.errors import InvalidCredentials, MissingCredentials

log = structlog.get_logger()

# bcrypt only reads the first 72 bytes of its input.
BCRYPT_MAX_BYTES = 72


# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------

def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


class PasswordHasher:
    """bcrypt hashing with a configurable cost factor."""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds
        self._dummy_hash = self.hash("orgauth-timing-dummy")

    def hash(self, password: str) -> str:
        return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=self.rounds)).decode()

    def verify(self, password: str, hashed: str) -> bool:
        """Verify a password against a bcrypt hash. A malformed hash never matches."""
        try:
            return bcrypt.checkpw(_password_bytes(password), hashed.encode())
        except ValueError:
            return False

    def verify_dummy(self, password: str) -> bool:
        """Spend one bcrypt check when there is no stored hash to compare against."""
        self.verify(password, self._dummy_hash)
        return False


# ---------------------------------------------------------------------------
# JWT
# ---------------------------------------------------------------------------

class InvalidToken(Exception):
    """Bad signature, malformed token, or missing subject."""


class TokenExpired(InvalidToken):
    pass


@dataclass(frozen=True)
class TokenClaims:
    user_id: str
    expires_at: datetime


class TokenService:
    """Issues and verifies signed bearer tokens carrying a user id."""

    def __init__(self, secret: str, algorithm: str = "HS256", expire_minutes: int = 60):
        self._secret = secret
        self.algorithm = algorithm
        self.lifetime = timedelta(minutes=expire_minutes)

    def issue(
        self, user_id: uuid.UUID | str, *, expires_delta: Optional[timedelta] = None
    ) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "id": str(user_id),
            "iat": now,
            "exp": now + (expires_delta or self.lifetime),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpired("Token has expired") from exc
        except jwt.PyJWTError as exc:
            raise InvalidToken(str(exc)) from exc

        return TokenClaims(
            user_id=payload["sub"],
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )


# ---------------------------------------------------------------------------
# Authorization dependency
# ---------------------------------------------------------------------------

def _bearer_token(header: str) -> Optional[str]:
    parts = header.split()
    return parts[1] if len(parts) > 1 else None


async def require_bearer(request: Request) -> TokenClaims:
    """Gate for protected routes: 401 without a header, 403 for a bad token."""
    header = request.headers.get("Authorization", "")
    if not header.strip():
        raise MissingCredentials()

    token = _bearer_token(header)
    if not token:
        log.info("auth.token_rejected", path=request.url.path, reason="malformed_header")
        raise InvalidCredentials()

    try:
        claims = request.app.state.ctx.tokens.verify(token)
    except TokenExpired:
        log.info("auth.token_rejected", path=request.url.path, reason="expired")
        raise InvalidCredentials()
    except InvalidToken:
        log.info("auth.token_rejected", path=request.url.path, reason="invalid")
        raise InvalidCredentials()

    structlog.contextvars.bind_contextvars(user_id=claims.user_id)
    return claims
