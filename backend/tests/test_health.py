"""
Smoke tests for the unauthenticated endpoints and middleware headers.
"""

import pytest


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["redis"] == "up"
    assert data["version"] == "v1"


@pytest.mark.asyncio
async def test_correlation_id_is_echoed(client):
    response = await client.get("/", headers={"X-Correlation-ID": "abc-123"})

    assert response.status_code == 200
    assert response.headers["X-Correlation-ID"] == "abc-123"
    assert "X-Process-Time" in response.headers


@pytest.mark.asyncio
async def test_correlation_id_is_generated(client):
    response = await client.get("/")

    assert response.headers["X-Correlation-ID"]
