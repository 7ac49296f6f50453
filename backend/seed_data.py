"""
Database seeding script for users, vehicles and GPS history.

Creates an ADMIN and a regular USER, plus sample vehicles with random GPS
histories around Riyadh. Run this script after the database is set up.
"""

import asyncio
import random
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from backend.app.db.session import AsyncSessionLocal, engine, Base
from backend.app.models.user import User
from backend.app.models.vehicle import Vehicle
from backend.app.models.gps_location import GpsLocation
from backend.app.models.enums import UserRole, VehicleStatus
from backend.app.core.security import get_password_hash
from sqlalchemy import select

# Riyadh city centre
BASE_LATITUDE = 24.7136
BASE_LONGITUDE = 46.6753

SAMPLE_VEHICLES = [
    ("Toyota Camry 2023", "ABC-123", "Toyota", "Camry", 85000.00, 2023, VehicleStatus.PUBLISHED),
    ("BMW X5 2022", "XYZ-456", "BMW", "X5", 120000.00, 2022, VehicleStatus.PUBLISHED),
    ("Mercedes C-Class 2024", "MER-789", "Mercedes", "C-Class", 95000.00, 2024, VehicleStatus.PUBLISHED),
    ("Audi A4 2023", "AUD-101", "Audi", "A4", 78000.00, 2023, VehicleStatus.NOT_PUBLISHED),
    ("Honda Accord 2022", "HON-202", "Honda", "Accord", 65000.00, 2022, VehicleStatus.PUBLISHED),
    ("Lexus ES 2024", "LEX-303", "Lexus", "ES", 110000.00, 2024, VehicleStatus.PUBLISHED),
    ("Nissan Altima 2023", "NIS-404", "Nissan", "Altima", 58000.00, 2023, VehicleStatus.NOT_PUBLISHED),
    ("Hyundai Sonata 2022", "HYU-505", "Hyundai", "Sonata", 52000.00, 2022, VehicleStatus.PUBLISHED),
]


def random_history(vehicle_id: int, now: datetime) -> list:
    """5-15 pings within ±0.1° of the city centre over the last 30 days."""
    return [
        GpsLocation(
            vehicle_id=vehicle_id,
            latitude=BASE_LATITUDE + random.randint(-100, 100) / 1000,
            longitude=BASE_LONGITUDE + random.randint(-100, 100) / 1000,
            timestamp=now - timedelta(
                days=random.randint(0, 30),
                hours=random.randint(0, 23),
                minutes=random.randint(0, 59)
            ),
        )
        for _ in range(random.randint(5, 15))
    ]


async def seed():
    """
    Seed initial data.

    Creates:
    - 1 ADMIN user owning the sample vehicles
    - 1 USER
    - 8 vehicles with GPS histories
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        print("🌱 Starting seeding...")

        result = await db.execute(select(User).where(User.email == "admin@fleet.com"))
        if result.scalar_one_or_none():
            print("ℹ️  ADMIN user already exists, skipping seeding")
            return

        admin_user = User(
            name="Admin User",
            email="admin@fleet.com",
            hashed_password=get_password_hash("password123"),
            role=UserRole.ADMIN,
            is_active=True
        )
        regular_user = User(
            name="Regular User",
            email="user@fleet.com",
            hashed_password=get_password_hash("password123"),
            role=UserRole.USER,
            is_active=True
        )
        db.add_all([admin_user, regular_user])
        await db.flush()
        print("✅ Created ADMIN (admin@fleet.com) and USER (user@fleet.com)")

        now = datetime.now(timezone.utc)
        for title, plate, brand, model, price, year, vehicle_status in SAMPLE_VEHICLES:
            vehicle = Vehicle(
                user_id=admin_user.id,
                title=title,
                plate_number=plate,
                brand=brand,
                model=model,
                price=price,
                year=year,
                status=vehicle_status
            )
            db.add(vehicle)
            await db.flush()
            db.add_all(random_history(vehicle.id, now))

        await db.commit()

        print(f"\n🎉 Created {len(SAMPLE_VEHICLES)} vehicles with GPS locations for admin@fleet.com")
        print("\nSeeded users (password: password123):")
        print("  - ADMIN: admin@fleet.com")
        print("  - USER:  user@fleet.com")


if __name__ == "__main__":
    asyncio.run(seed())
