"""
Shared fixtures for server tests.

Each test gets its own application built from explicit settings, backed by a
file SQLite database in the test's tmp_path. bcrypt runs at its minimum cost
so the suite stays fast.
"""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.config import Settings
from app.core.database import init_db
from app.main import create_app

TEST_SECRET = "test-secret-0123456789abcdef0123456789abcdef"

JOHN = {
    "firstName": "John",
    "lastName": "Doe",
    "email": "john.doe@example.com",
    "password": "password",
    "phone": "1234567890",
}


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'orgauth.db'}",
        jwt_secret=TEST_SECRET,
        bcrypt_rounds=4,
    )


@pytest.fixture
async def app(settings):
    application = create_app(settings)
    await init_db(application.state.ctx.engine)
    yield application
    await application.state.ctx.close()


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def john(client: AsyncClient) -> dict:
    """Register John and return the registration ``data`` (accessToken + user)."""
    resp = await client.post("/auth/register", json=JOHN)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


@pytest.fixture
def auth_headers(john: dict) -> dict:
    return {"Authorization": f"Bearer {john['accessToken']}"}


@pytest.fixture
def tokens(app):
    return app.state.ctx.tokens
