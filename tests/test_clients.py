"""
Tests for client endpoints.
"""

import pytest
from httpx import AsyncClient


async def other_user_headers(client: AsyncClient) -> dict:
    response = await client.post(
        "/api/v1/auth/sign-up",
        json={"email": "other@example.com", "password": "otherpassword", "name": "Other"},
    )
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.mark.asyncio
async def test_create_and_get_client(auth_client: AsyncClient):
    response = await auth_client.post(
        "/api/v1/clients",
        json={"name": "Acme", "email": "billing@acme.com", "phone": "123", "address": "Road 1"},
    )

    assert response.status_code == 201
    created = response.json()

    fetched = await auth_client.get(f"/api/v1/clients/{created['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["name"] == "Acme"


@pytest.mark.asyncio
async def test_list_and_search_clients(auth_client: AsyncClient):
    for name in ("Acme", "Globex", "Initech"):
        await auth_client.post("/api/v1/clients", json={"name": name})

    response = await auth_client.get("/api/v1/clients")
    assert response.json()["total"] == 3

    response = await auth_client.get("/api/v1/clients", params={"search": "glob"})
    data = response.json()
    assert data["total"] == 1
    assert data["items"][0]["name"] == "Globex"

    response = await auth_client.get("/api/v1/clients", params={"per_page": 2, "page": 2})
    data = response.json()
    assert len(data["items"]) == 1
    assert data["pages"] == 2


@pytest.mark.asyncio
async def test_update_client(auth_client: AsyncClient):
    created = (await auth_client.post("/api/v1/clients", json={"name": "Acme"})).json()

    response = await auth_client.put(
        f"/api/v1/clients/{created['id']}",
        json={"phone": "555-0100"},
    )

    assert response.status_code == 200
    assert response.json()["phone"] == "555-0100"
    assert response.json()["name"] == "Acme"


@pytest.mark.asyncio
async def test_deleted_client_is_hidden(auth_client: AsyncClient):
    created = (await auth_client.post("/api/v1/clients", json={"name": "Acme"})).json()

    response = await auth_client.delete(f"/api/v1/clients/{created['id']}")
    assert response.status_code == 200

    assert (await auth_client.get(f"/api/v1/clients/{created['id']}")).status_code == 404
    assert (await auth_client.get("/api/v1/clients")).json()["total"] == 0


@pytest.mark.asyncio
async def test_clients_are_scoped_by_owner(auth_client: AsyncClient):
    created = (await auth_client.post("/api/v1/clients", json={"name": "Mine"})).json()
    headers = await other_user_headers(auth_client)

    response = await auth_client.get(f"/api/v1/clients/{created['id']}", headers=headers)
    assert response.status_code == 404
    assert response.json()["error_code"] == "RESOURCE_NOT_FOUND"

    response = await auth_client.get("/api/v1/clients", headers=headers)
    assert response.json()["total"] == 0


@pytest.mark.asyncio
async def test_update_client_rejects_null_name(auth_client: AsyncClient):
    created = (await auth_client.post("/api/v1/clients", json={"name": "Acme"})).json()

    response = await auth_client.put(f"/api/v1/clients/{created['id']}", json={"name": None})

    assert response.status_code == 422
    assert response.json()["errors"][0]["field"] == "body -> name"
    fetched = await auth_client.get(f"/api/v1/clients/{created['id']}")
    assert fetched.json()["name"] == "Acme"
