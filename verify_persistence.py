"""
Persistence check against a live server.

Starts uvicorn, records a short drive for a new vehicle, restarts the
server and verifies the travel segments are still computed from the
stored GPS history. Needs a reachable database and Redis.
"""

import time
import subprocess
import httpx
import sys
import os
import signal

BASE_URL = "http://127.0.0.1:8000"
API_PREFIX = "/v1"

EMAIL = "persist_owner@fleet.com"
PASSWORD = "securePassword123"
PLATE = "PERSIST-001"

DRIVE = [
    (24.7136, 46.6753, "2024-01-15T08:00:00Z"),
    (24.6900, 46.7100, "2024-01-15T08:12:00Z"),
    (24.6408, 46.7728, "2024-01-15T08:30:00Z"),
]


def start_server():
    return subprocess.Popen(
        [sys.executable, "-m", "uvicorn", "backend.app.main:app", "--host", "127.0.0.1", "--port", "8000"],
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        env={**os.environ, "DB_ECHO": "False"}
    )


def stop_server(proc):
    proc.send_signal(signal.SIGTERM)
    proc.wait()


def wait_for_server(retries=10, delay=2):
    url = f"{BASE_URL}/health"
    print(f"Waiting for server at {url}...")
    for _ in range(retries):
        try:
            resp = httpx.get(url)
            if resp.status_code == 200:
                print("✅ Server is up!")
                return True
        except httpx.TransportError:
            pass
        time.sleep(delay)
    print("❌ Server failed to start.")
    return False


def login(client):
    resp = client.post(f"{API_PREFIX}/auth/login", json={"email": EMAIL, "password": PASSWORD})
    if resp.status_code != 200:
        raise RuntimeError(f"Login failed: {resp.status_code} {resp.text}")
    return resp.json()["access_token"]


def seed_drive(client):
    resp = client.post(f"{API_PREFIX}/auth/register", json={
        "name": "Persistence Owner",
        "email": EMAIL,
        "password": PASSWORD,
        "password_confirmation": PASSWORD
    })
    if resp.status_code == 400 and "already registered" in resp.text:
        print("⚠️ User already exists (persistence working from previous run?)")
        return None
    if resp.status_code != 201:
        raise RuntimeError(f"Registration failed: {resp.status_code} {resp.text}")

    headers = {"Authorization": f"Bearer {resp.json()['access_token']}"}
    resp = client.post(f"{API_PREFIX}/vehicles", json={
        "title": "Persistence Test Vehicle",
        "plate_number": PLATE,
        "brand": "Toyota",
        "model": "Hilux",
        "price": 95000,
        "year": 2023,
        "status": "Published"
    }, headers=headers)
    if resp.status_code != 201:
        raise RuntimeError(f"Vehicle creation failed: {resp.status_code} {resp.text}")
    vehicle_id = resp.json()["data"]["id"]

    for latitude, longitude, timestamp in DRIVE:
        resp = client.post(f"{API_PREFIX}/gps-locations", json={
            "vehicle_id": vehicle_id,
            "latitude": latitude,
            "longitude": longitude,
            "timestamp": timestamp
        }, headers=headers)
        if resp.status_code != 201:
            raise RuntimeError(f"GPS ping failed: {resp.status_code} {resp.text}")

    print(f"✅ Vehicle {vehicle_id} recorded {len(DRIVE)} GPS locations")
    return vehicle_id


def run_verification():
    print("\n--- [Step 1] Starting Server (Initial) ---")
    proc = start_server()
    try:
        if not wait_for_server():
            stop_server(proc)
            print("Server Stderr:", proc.stderr.read().decode())
            raise RuntimeError("Server start failed")

        print("\n--- [Step 2] Recording a Drive ---")
        with httpx.Client(base_url=BASE_URL) as client:
            seed_drive(client)
    finally:
        print("\n--- [Step 3] Stopping Server ---")
        stop_server(proc)

    time.sleep(2)  # port release

    print("\n--- [Step 4] Restarting Server (Verification) ---")
    proc = start_server()
    try:
        if not wait_for_server():
            raise RuntimeError("Server restart failed")

        with httpx.Client(base_url=BASE_URL) as client:
            print("\n--- [Step 5] Logging In (Post-Restart) ---")
            headers = {"Authorization": f"Bearer {login(client)}"}
            print("✅ Login Successful (User Persisted!)")

            print("\n--- [Step 6] Verifying Travel Segments ---")
            resp = client.get(f"{API_PREFIX}/vehicles", params={"search": PLATE}, headers=headers)
            vehicles = resp.json()["data"]["vehicles"]
            if not vehicles:
                raise RuntimeError("Vehicle missing after restart")
            vehicle = vehicles[0]

            resp = client.get(f"{API_PREFIX}/vehicles/{vehicle['id']}/travel-segments", headers=headers)
            data = resp.json()["data"]
            if not data or data["total_segments"] != len(DRIVE) - 1:
                raise RuntimeError(f"Unexpected travel segments: {resp.text}")
            if data["total_distance_km"] != vehicle["total_distance"]:
                raise RuntimeError("Listing distance and segment total disagree")

            print(f"✅ {data['total_segments']} segments, {data['total_distance_km']} km")
    finally:
        print("\n--- [Step 7] Stopping Server ---")
        stop_server(proc)


if __name__ == "__main__":
    run_verification()
