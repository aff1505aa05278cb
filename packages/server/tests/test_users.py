"""
Tests for User endpoints and the bearer-token gate.

Covers:
- GET /api/users/{userId}
- GET /api/users/{userId}/organisations
- 401 / 403 split on protected routes
"""

from __future__ import annotations

import uuid
from datetime import timedelta
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from app.core.auth import TokenService
from app.core.errors import StoreError
from app.services import users as user_service

from conftest import JOHN


# ---------------------------------------------------------------------------
# GET /api/users/{userId}
# ---------------------------------------------------------------------------

class TestGetUser:
    @pytest.mark.asyncio
    async def test_get_own_profile(self, client: AsyncClient, john, auth_headers):
        user_id = john["user"]["userId"]
        resp = await client.get(f"/api/users/{user_id}", headers=auth_headers)
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "success"
        assert body["message"] == "User retrieved successfully"
        assert body["data"]["userId"] == user_id
        assert body["data"]["email"] == JOHN["email"]
        assert body["data"]["firstName"] == "John"
        assert "password" not in body["data"]
        assert "passwordHash" not in body["data"]

    @pytest.mark.asyncio
    async def test_any_user_can_read_another(self, client: AsyncClient, john, auth_headers):
        resp = await client.post(
            "/auth/register",
            json={**JOHN, "email": "jane.roe@example.com", "firstName": "Jane"},
        )
        jane_id = resp.json()["data"]["user"]["userId"]

        resp = await client.get(f"/api/users/{jane_id}", headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json()["data"]["firstName"] == "Jane"

    @pytest.mark.asyncio
    async def test_unknown_user(self, client: AsyncClient, auth_headers):
        resp = await client.get(f"/api/users/{uuid.uuid4()}", headers=auth_headers)
        assert resp.status_code == 404
        assert resp.json() == {
            "status": "error",
            "message": "User not found",
            "statusCode": 404,
        }

    @pytest.mark.asyncio
    async def test_non_uuid_id_is_not_found(self, client: AsyncClient, auth_headers):
        resp = await client.get("/api/users/not-a-uuid", headers=auth_headers)
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_store_error_is_500(self, client: AsyncClient, john, auth_headers, monkeypatch):
        monkeypatch.setattr(
            user_service, "find_user_by_id", AsyncMock(side_effect=StoreError("boom"))
        )
        resp = await client.get(f"/api/users/{john['user']['userId']}", headers=auth_headers)
        assert resp.status_code == 500
        assert resp.json() == {"status": "error", "message": "Server error", "statusCode": 500}


# ---------------------------------------------------------------------------
# Bearer-token gate
# ---------------------------------------------------------------------------

class TestBearerGate:
    @pytest.mark.asyncio
    async def test_no_header_is_401(self, client: AsyncClient, john):
        resp = await client.get(f"/api/users/{john['user']['userId']}")
        assert resp.status_code == 401
        assert resp.json()["message"] == "Unauthorized"

    @pytest.mark.asyncio
    async def test_empty_header_is_401(self, client: AsyncClient, john):
        resp = await client.get(
            f"/api/users/{john['user']['userId']}", headers={"Authorization": ""}
        )
        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_header_without_token_is_403(self, client: AsyncClient, john):
        resp = await client.get(
            f"/api/users/{john['user']['userId']}", headers={"Authorization": "Bearer"}
        )
        assert resp.status_code == 403
        assert resp.json()["message"] == "Forbidden"

    @pytest.mark.asyncio
    async def test_garbage_token_is_403(self, client: AsyncClient, john):
        resp = await client.get(
            f"/api/users/{john['user']['userId']}",
            headers={"Authorization": "Bearer not.a.token"},
        )
        assert resp.status_code == 403

    @pytest.mark.asyncio
    async def test_token_from_other_secret_is_403(self, client: AsyncClient, john):
        user_id = john["user"]["userId"]
        token = TokenService("another-secret-0123456789abcdef0123").issue(uuid.UUID(user_id))
        resp = await client.get(
            f"/api/users/{user_id}", headers={"Authorization": f"Bearer {token}"}
        )
        assert resp.status_code == 403

    @pytest.mark.asyncio
    async def test_expired_token_is_403(self, client: AsyncClient, john, tokens):
        user_id = john["user"]["userId"]
        token = tokens.issue(uuid.UUID(user_id), expires_delta=timedelta(seconds=-1))
        resp = await client.get(
            f"/api/users/{user_id}", headers={"Authorization": f"Bearer {token}"}
        )
        assert resp.status_code == 403

    @pytest.mark.asyncio
    async def test_scheme_word_is_not_checked(self, client: AsyncClient, john):
        user_id = john["user"]["userId"]
        resp = await client.get(
            f"/api/users/{user_id}",
            headers={"Authorization": f"Token {john['accessToken']}"},
        )
        assert resp.status_code == 200


# ---------------------------------------------------------------------------
# GET /api/users/{userId}/organisations
# ---------------------------------------------------------------------------

class TestUserOrganisations:
    @pytest.mark.asyncio
    async def test_lists_memberships(self, client: AsyncClient, john, auth_headers):
        user_id = john["user"]["userId"]
        created = await client.post("/api/organisations", json={"name": "Acme"})
        org_id = created.json()["data"]["orgId"]
        await client.post("/api/organisations", json={"name": "Not joined"})
        await client.post(f"/api/organisations/{org_id}/users", json={"userId": user_id})

        resp = await client.get(f"/api/users/{user_id}/organisations", headers=auth_headers)
        assert resp.status_code == 200
        body = resp.json()
        assert body["message"] == "User organisations retrieved successfully"
        orgs = body["data"]["organisations"]
        assert [o["orgId"] for o in orgs] == [org_id]
        assert orgs[0]["name"] == "Acme"

    @pytest.mark.asyncio
    async def test_no_memberships(self, client: AsyncClient, john, auth_headers):
        resp = await client.get(
            f"/api/users/{john['user']['userId']}/organisations", headers=auth_headers
        )
        assert resp.status_code == 200
        assert resp.json()["data"]["organisations"] == []

    @pytest.mark.asyncio
    async def test_unknown_user(self, client: AsyncClient, auth_headers):
        resp = await client.get(f"/api/users/{uuid.uuid4()}/organisations", headers=auth_headers)
        assert resp.status_code == 404
        assert resp.json()["message"] == "User not found"

    @pytest.mark.asyncio
    async def test_requires_token(self, client: AsyncClient, john):
        resp = await client.get(f"/api/users/{john['user']['userId']}/organisations")
        assert resp.status_code == 401
