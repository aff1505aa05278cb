"""
Database connection and session management.
"""

from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

from app.core.config import Settings
from app.core.errors import StoreError


def _enable_sqlite_foreign_keys(dbapi_conn, _connection_record) -> None:
    """SQLite ignores FOREIGN KEY clauses unless enabled per connection."""
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine for the configured database URL."""
    engine = create_async_engine(
        settings.database_url,
        echo=settings.debug,
        future=True,
    )
    if make_url(settings.database_url).get_backend_name() == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def create_session_factory(engine: AsyncEngine) -> sessionmaker:
    return sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def init_db(engine: AsyncEngine) -> None:
    """Create all tables (tests and local scripts only; use Alembic otherwise)."""
    import app.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    async with request.app.state.ctx.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def commit(session: AsyncSession) -> None:
    """Commit the request's writes. Driver failures surface as StoreError."""
    try:
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        raise StoreError(str(exc)) from exc
