"""
Shared API helpers for integration tests.
"""

VEHICLE_PAYLOAD = {
    "title": "Toyota Camry 2023",
    "plate_number": "ABC-123",
    "brand": "Toyota",
    "model": "Camry",
    "price": 85000.0,
    "year": 2023,
    "status": "Published",
}


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


async def register_user(client, email: str, name: str = "Test User", password: str = "password123"):
    """Register through the API and return (token, user_id)."""
    response = await client.post("/v1/auth/register", json={
        "name": name,
        "email": email,
        "password": password,
        "password_confirmation": password
    })
    assert response.status_code == 201, response.text
    data = response.json()
    return data["access_token"], data["user"]["id"]


async def create_vehicle(client, token: str, **overrides) -> dict:
    """Create a vehicle through the API and return its JSON."""
    response = await client.post("/v1/vehicles", json={**VEHICLE_PAYLOAD, **overrides}, headers=auth(token))
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def add_location(client, token: str, vehicle_id: int, latitude: float, longitude: float, timestamp: str):
    response = await client.post("/v1/gps-locations", json={
        "vehicle_id": vehicle_id,
        "latitude": latitude,
        "longitude": longitude,
        "timestamp": timestamp
    }, headers=auth(token))
    assert response.status_code == 201, response.text
    return response.json()["data"]
