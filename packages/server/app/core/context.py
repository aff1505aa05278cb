"""
Per-application context.

Everything a request handler needs beyond its own input lives here and is
built once in ``create_app``; routes reach it through ``request.app.state.ctx``.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.orm import sessionmaker

from app.core.auth import PasswordHasher, TokenService
from app.core.config import Settings
from app.core.database import create_engine, create_session_factory


@dataclass
class AppContext:
    settings: Settings
    engine: AsyncEngine
    session_factory: sessionmaker
    hasher: PasswordHasher
    tokens: TokenService

    @classmethod
    def from_settings(cls, settings: Settings) -> "AppContext":
        engine = create_engine(settings)
        return cls(
            settings=settings,
            engine=engine,
            session_factory=create_session_factory(engine),
            hasher=PasswordHasher(rounds=settings.bcrypt_rounds),
            tokens=TokenService(
                secret=settings.jwt_secret,
                algorithm=settings.jwt_algorithm,
                expire_minutes=settings.jwt_expire_minutes,
            ),
        )

    async def close(self) -> None:
        await self.engine.dispose()


def get_context(request: Request) -> AppContext:
    """FastAPI dependency for the application context."""
    return request.app.state.ctx
