"""
GPS Location & Travel API Endpoints.

Records GPS pings for vehicles and reports travel segments derived
from consecutive pings.
"""

from datetime import datetime, timezone
from fastapi import APIRouter, Depends, HTTPException, status, Path
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from backend.app.db.session import get_db
from backend.app.models.gps_location import GpsLocation
from backend.app.models.vehicle import Vehicle
from backend.app.schemas.gps_location import GpsLocationCreate, GpsLocationResponse
from backend.app.schemas.travel import TravelSegmentsData, FleetTravelEntry
from backend.app.core.dependencies import get_current_user
from backend.app.core.guards import OwnershipGuard
from backend.app.services.travel import TravelService, to_vehicle_ref
from backend.app.services.vehicles import VehicleService

router = APIRouter(tags=["GPS & Travels"])
ownership_guard = OwnershipGuard()


@router.post("/gps-locations", status_code=status.HTTP_201_CREATED)
async def record_location(
    location: GpsLocationCreate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Record a GPS position for a vehicle.

    The vehicle must exist and belong to the caller (admins may record
    for any vehicle). Timestamp defaults to now.
    """
    vehicle = (await db.execute(
        select(Vehicle).where(Vehicle.id == location.vehicle_id, Vehicle.deleted_at.is_(None))
    )).scalar_one_or_none()

    if not vehicle:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="The selected vehicle id is invalid"
        )

    ownership_guard.enforce(vehicle.user_id, current_user, "vehicle")

    gps_location = GpsLocation(
        vehicle_id=vehicle.id,
        latitude=location.latitude,
        longitude=location.longitude,
        timestamp=location.timestamp or datetime.now(timezone.utc)
    )

    db.add(gps_location)
    await db.commit()
    await db.refresh(gps_location)

    return {
        "success": True,
        "message": "GPS location saved successfully",
        "data": GpsLocationResponse.model_validate(gps_location)
    }


@router.get("/vehicles/{vehicle_id}/locations")
async def get_vehicle_locations(
    vehicle_id: int = Path(..., description="Vehicle ID"),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    GPS history of a vehicle, oldest first.
    """
    vehicle = await VehicleService.get_accessible_vehicle(db, vehicle_id, current_user)
    locations = await TravelService.load_locations(db, vehicle.id)

    return {
        "success": True,
        "data": [GpsLocationResponse.model_validate(loc) for loc in locations]
    }


@router.get("/vehicles/{vehicle_id}/travel-segments")
async def get_travel_segments(
    vehicle_id: int = Path(..., description="Vehicle ID"),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Travel segments (consecutive GPS pairs) with distance and duration.

    With fewer than two GPS locations the response is still successful:
    `data` is empty and `message` explains why.
    """
    vehicle = await VehicleService.get_accessible_vehicle(db, vehicle_id, current_user)
    summary = await TravelService.get_segments(db, vehicle)

    if summary.is_empty:
        return {"success": True, "data": [], "message": summary.note}

    return {
        "success": True,
        "data": TravelSegmentsData.build(to_vehicle_ref(vehicle), summary)
    }


@router.get("/travels")
async def get_all_travels(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Travel summaries for every visible vehicle (all vehicles for admins).

    Vehicles with fewer than two GPS locations are not listed.
    """
    travels = await TravelService.get_fleet_travels(db, current_user)

    return {
        "success": True,
        "data": [FleetTravelEntry.from_travel(travel) for travel in travels]
    }
