"""
Tests for authentication and account endpoints.
"""

import pytest
from httpx import AsyncClient


SIGN_UP = {
    "email": "newuser@example.com",
    "password": "securepassword123",
    "name": "New User",
    "phone": "+620000001",
}


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.mark.asyncio
async def test_sign_up_returns_tokens(client: AsyncClient):
    """Test successful sign-up."""
    response = await client.post("/api/v1/auth/sign-up", json=SIGN_UP)

    assert response.status_code == 201
    data = response.json()
    assert "access_token" in data
    assert "refresh_token" in data
    assert data["token_type"] == "bearer"

    me = await client.get("/api/v1/users/me", headers=bearer(data["access_token"]))
    assert me.status_code == 200
    assert me.json()["email"] == SIGN_UP["email"]
    assert "hashed_password" not in me.json()


@pytest.mark.asyncio
async def test_sign_up_duplicate_email(client: AsyncClient, test_user):
    """Test sign-up with an email held by an active account."""
    response = await client.post(
        "/api/v1/auth/sign-up",
        json={**SIGN_UP, "email": "test@example.com"},
    )

    assert response.status_code == 409
    assert response.json()["error_code"] == "ALREADY_EXISTS"


@pytest.mark.asyncio
async def test_sign_up_invalid_payload(client: AsyncClient):
    response = await client.post(
        "/api/v1/auth/sign-up",
        json={"email": "not-an-email", "password": "short", "name": "X"},
    )

    assert response.status_code == 422
    fields = {error["field"] for error in response.json()["errors"]}
    assert "body -> email" in fields
    assert "body -> password" in fields


@pytest.mark.asyncio
async def test_sign_in_success(client: AsyncClient, test_user):
    response = await client.post(
        "/api/v1/auth/sign-in",
        json={"email": "test@example.com", "password": "testpassword123"},
    )

    assert response.status_code == 200
    assert "access_token" in response.json()


@pytest.mark.asyncio
async def test_sign_in_wrong_password(client: AsyncClient, test_user):
    response = await client.post(
        "/api/v1/auth/sign-in",
        json={"email": "test@example.com", "password": "wrongpassword"},
    )

    assert response.status_code == 401
    assert response.json()["error_code"] == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_refresh_issues_new_pair(client: AsyncClient):
    tokens = (await client.post("/api/v1/auth/sign-up", json=SIGN_UP)).json()

    response = await client.post(
        "/api/v1/auth/refresh",
        json={"refresh_token": tokens["refresh_token"]},
    )

    assert response.status_code == 200
    assert "access_token" in response.json()


@pytest.mark.asyncio
async def test_refresh_rejects_access_token(client: AsyncClient):
    tokens = (await client.post("/api/v1/auth/sign-up", json=SIGN_UP)).json()

    response = await client.post(
        "/api/v1/auth/refresh",
        json={"refresh_token": tokens["access_token"]},
    )

    assert response.status_code == 401
    assert response.json()["error_code"] == "INVALID_TOKEN"


@pytest.mark.asyncio
async def test_me_requires_token(client: AsyncClient):
    response = await client.get("/api/v1/users/me")

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_me_rejects_garbage_token(client: AsyncClient):
    response = await client.get("/api/v1/users/me", headers=bearer("not.a.jwt"))

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_update_profile(auth_client: AsyncClient):
    response = await auth_client.put(
        "/api/v1/users/me/profile",
        json={"name": "Renamed", "address": "5 New Road"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Renamed"
    assert data["address"] == "5 New Road"
    assert data["email"] == "test@example.com"


@pytest.mark.asyncio
async def test_update_profile_email_collision(auth_client: AsyncClient):
    await auth_client.post("/api/v1/auth/sign-up", json=SIGN_UP)

    response = await auth_client.put(
        "/api/v1/users/me/profile",
        json={"email": SIGN_UP["email"]},
    )

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_update_banking(auth_client: AsyncClient):
    response = await auth_client.put(
        "/api/v1/users/me/banking",
        json={"bank_name": "Other Bank", "bank_account_number": "999888"},
    )

    assert response.status_code == 200
    assert response.json()["bank_name"] == "Other Bank"
    assert response.json()["bank_account_number"] == "999888"
    assert response.json()["bank_account_name"] == "Test User"


@pytest.mark.asyncio
async def test_change_password(auth_client: AsyncClient):
    wrong = await auth_client.post(
        "/api/v1/users/me/change-password",
        json={"current_password": "nope-nope", "new_password": "brandnewpassword"},
    )
    assert wrong.status_code == 401

    response = await auth_client.post(
        "/api/v1/users/me/change-password",
        json={"current_password": "testpassword123", "new_password": "brandnewpassword"},
    )
    assert response.status_code == 200

    sign_in = await auth_client.post(
        "/api/v1/auth/sign-in",
        json={"email": "test@example.com", "password": "brandnewpassword"},
    )
    assert sign_in.status_code == 200


@pytest.mark.asyncio
async def test_deactivate_then_sign_up_again(auth_client: AsyncClient):
    created = await auth_client.post("/api/v1/clients", json={"name": "Kept Client"})
    assert created.status_code == 201
    client_id = created.json()["id"]

    response = await auth_client.post("/api/v1/users/me/deactivate")
    assert response.status_code == 200

    # Old token no longer resolves to an active user
    assert (await auth_client.get("/api/v1/users/me")).status_code == 401

    sign_in = await auth_client.post(
        "/api/v1/auth/sign-in",
        json={"email": "test@example.com", "password": "testpassword123"},
    )
    assert sign_in.status_code == 401

    sign_up = await auth_client.post(
        "/api/v1/auth/sign-up",
        json={"email": "test@example.com", "password": "comeback-password", "name": "Back Again"},
    )
    assert sign_up.status_code == 201

    headers = bearer(sign_up.json()["access_token"])
    clients = await auth_client.get("/api/v1/clients", headers=headers)
    assert [c["id"] for c in clients.json()["items"]] == [client_id]

    me = await auth_client.get("/api/v1/users/me", headers=headers)
    assert me.json()["name"] == "Back Again"
