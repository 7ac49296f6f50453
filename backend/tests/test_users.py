"""
Integration tests for admin user management.
"""

import pytest

from backend.tests.helpers import auth, create_vehicle, register_user


@pytest.mark.asyncio
async def test_non_admin_blocked(client, user_token):
    response = await client.get("/v1/users", headers=auth(user_token[0]))

    assert response.status_code == 403
    assert response.json()["message"] == "Admin access required"


@pytest.mark.asyncio
async def test_admin_lists_and_searches_users(client, admin_token, user_token, other_user_token):
    admin, _ = admin_token

    response = await client.get("/v1/users", headers=auth(admin))
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 3
    assert data["per_page"] == 15

    response = await client.get("/v1/users", params={"search": "owner two"}, headers=auth(admin))
    assert [u["email"] for u in response.json()["users"]] == ["owner2@test.com"]

    response = await client.get("/v1/users", params={"sort_by": "email", "sort_order": "asc"}, headers=auth(admin))
    assert [u["email"] for u in response.json()["users"]] == [
        "admin@test.com", "owner1@test.com", "owner2@test.com"
    ]


@pytest.mark.asyncio
async def test_admin_creates_admin(client, admin_token):
    response = await client.post("/v1/users", json={
        "name": "Second Admin",
        "email": "admin2@test.com",
        "password": "secret123",
        "role": "ADMIN"
    }, headers=auth(admin_token[0]))

    assert response.status_code == 201
    assert response.json()["role"] == "ADMIN"

    response = await client.post("/v1/auth/login", json={
        "email": "admin2@test.com",
        "password": "secret123"
    })
    assert response.status_code == 200
    assert response.json()["user"]["role"] == "ADMIN"


@pytest.mark.asyncio
async def test_create_user_duplicate_email(client, admin_token, user_token):
    response = await client.post("/v1/users", json={
        "name": "Dup",
        "email": "owner1@test.com",
        "password": "secret123"
    }, headers=auth(admin_token[0]))

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_update_user_password(client, admin_token):
    _, user_id = await register_user(client, "jane@test.com")

    response = await client.put(f"/v1/users/{user_id}", json={
        "name": "Jane Renamed",
        "password": "newpass123"
    }, headers=auth(admin_token[0]))
    assert response.status_code == 200
    assert response.json()["name"] == "Jane Renamed"

    response = await client.post("/v1/auth/login", json={"email": "jane@test.com", "password": "newpass123"})
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_role_change_applies_without_relogin(client, admin_token):
    token, user_id = await register_user(client, "jane@test.com")

    response = await client.put(f"/v1/users/{user_id}", json={"role": "ADMIN"}, headers=auth(admin_token[0]))
    assert response.status_code == 200

    response = await client.get("/v1/users", headers=auth(token))
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_get_missing_user(client, admin_token):
    response = await client.get("/v1/users/9999", headers=auth(admin_token[0]))

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_admin_cannot_delete_self(client, admin_token):
    admin, admin_id = admin_token

    response = await client.delete(f"/v1/users/{admin_id}", headers=auth(admin))

    assert response.status_code == 400
    assert response.json()["message"] == "You cannot delete your own account"


@pytest.mark.asyncio
async def test_delete_user_removes_their_vehicles(client, admin_token, user_token):
    admin, _ = admin_token
    token, user_id = user_token
    await create_vehicle(client, token)

    response = await client.delete(f"/v1/users/{user_id}", headers=auth(admin))
    assert response.status_code == 200

    response = await client.get("/v1/vehicles", params={"include_deleted": True}, headers=auth(admin))
    assert response.json()["data"]["total"] == 0

    response = await client.get(f"/v1/users/{user_id}", headers=auth(admin))
    assert response.status_code == 404
