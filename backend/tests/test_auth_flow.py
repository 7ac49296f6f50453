"""
Integration tests for the authentication flow.

Verifies Register -> Login -> Profile -> Refresh -> Logout.
"""

import pytest

from backend.tests.helpers import auth, register_user


@pytest.mark.asyncio
async def test_register_returns_token_and_user(client):
    response = await client.post("/v1/auth/register", json={
        "name": "Jane Driver",
        "email": "jane@test.com",
        "password": "password123",
        "password_confirmation": "password123"
    })
    assert response.status_code == 201
    data = response.json()
    assert data["success"] is True
    assert data["token_type"] == "bearer"
    assert data["expires_in"] > 0
    assert data["access_token"]
    assert data["user"]["email"] == "jane@test.com"
    assert data["user"]["role"] == "USER"
    assert "hashed_password" not in data["user"]


@pytest.mark.asyncio
async def test_register_password_confirmation_mismatch(client):
    response = await client.post("/v1/auth/register", json={
        "name": "Jane Driver",
        "email": "jane@test.com",
        "password": "password123",
        "password_confirmation": "password124"
    })
    assert response.status_code == 422
    data = response.json()
    assert data["success"] is False
    assert data["error_code"] == "ERR_VALIDATION"


@pytest.mark.asyncio
async def test_register_duplicate_email(client):
    await register_user(client, "jane@test.com")

    response = await client.post("/v1/auth/register", json={
        "name": "Another Jane",
        "email": "jane@test.com",
        "password": "password123",
        "password_confirmation": "password123"
    })
    assert response.status_code == 400
    assert response.json()["message"] == "Email already registered"


@pytest.mark.asyncio
async def test_register_cannot_choose_role(client):
    """Extra fields are ignored; self-registration always yields USER."""
    response = await client.post("/v1/auth/register", json={
        "name": "Sneaky",
        "email": "sneaky@test.com",
        "password": "password123",
        "password_confirmation": "password123",
        "role": "ADMIN"
    })
    assert response.status_code == 201
    assert response.json()["user"]["role"] == "USER"


@pytest.mark.asyncio
async def test_login_and_profile(client):
    await register_user(client, "jane@test.com", name="Jane Driver")

    response = await client.post("/v1/auth/login", json={
        "email": "jane@test.com",
        "password": "password123"
    })
    assert response.status_code == 200
    token = response.json()["access_token"]

    response = await client.get("/v1/auth/profile", headers=auth(token))
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["user"]["name"] == "Jane Driver"
    assert data["user"]["email"] == "jane@test.com"


@pytest.mark.asyncio
async def test_login_wrong_password(client):
    await register_user(client, "jane@test.com")

    response = await client.post("/v1/auth/login", json={
        "email": "jane@test.com",
        "password": "wrongpass"
    })
    assert response.status_code == 401
    data = response.json()
    assert data["error_code"] == "ERR_UNAUTHORIZED"
    assert data["message"] == "Invalid credentials"


@pytest.mark.asyncio
async def test_login_unknown_email(client):
    response = await client.post("/v1/auth/login", json={
        "email": "nobody@test.com",
        "password": "password123"
    })
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_invalid_token_rejected(client):
    response = await client.get("/v1/auth/profile", headers=auth("not-a-jwt"))
    assert response.status_code == 401
    assert response.json()["message"] == "Could not validate credentials"


@pytest.mark.asyncio
async def test_missing_token_rejected(client):
    response = await client.get("/v1/auth/profile")
    assert response.status_code in (401, 403)
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_logout_revokes_token(client):
    token, _ = await register_user(client, "jane@test.com")

    response = await client.post("/v1/auth/logout", headers=auth(token))
    assert response.status_code == 200
    assert response.json()["message"] == "Successfully logged out"

    response = await client.get("/v1/auth/profile", headers=auth(token))
    assert response.status_code == 401
    assert response.json()["message"] == "Token has been revoked"


@pytest.mark.asyncio
async def test_refresh_rotates_token(client):
    old_token, user_id = await register_user(client, "jane@test.com")

    response = await client.post("/v1/auth/refresh", headers=auth(old_token))
    assert response.status_code == 200
    data = response.json()
    new_token = data["access_token"]
    assert new_token != old_token
    assert data["user"]["id"] == user_id

    response = await client.get("/v1/auth/profile", headers=auth(old_token))
    assert response.status_code == 401

    response = await client.get("/v1/auth/profile", headers=auth(new_token))
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_logout_fails_when_revocation_store_is_down(client, mocker):
    token, _ = await register_user(client, "jane@test.com")

    mocker.patch(
        "backend.app.api.v1.endpoints.auth.revoke_token",
        return_value=False
    )

    response = await client.post("/v1/auth/logout", headers=auth(token))
    assert response.status_code == 503


@pytest.mark.asyncio
async def test_inactive_user_is_blocked(client, admin_token):
    admin, _ = admin_token
    token, user_id = await register_user(client, "jane@test.com")

    response = await client.put(f"/v1/users/{user_id}", json={"is_active": False}, headers=auth(admin))
    assert response.status_code == 200

    response = await client.get("/v1/auth/profile", headers=auth(token))
    assert response.status_code == 403

    response = await client.post("/v1/auth/login", json={
        "email": "jane@test.com",
        "password": "password123"
    })
    assert response.status_code == 403
