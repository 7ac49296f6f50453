"""
Vehicle API Endpoints.

Users manage their own vehicles; admins see and manage every vehicle.
Deletion is soft and can be undone with restore.
"""

import math
from datetime import datetime, timezone
from typing import Literal, Optional
from fastapi import APIRouter, Depends, status, Query, Path
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_
from backend.app.db.session import get_db
from backend.app.models.vehicle import Vehicle
from backend.app.models.enums import VehicleStatus
from backend.app.schemas.vehicle import (
    VehicleCreate, VehicleUpdate, VehicleResponse, VehicleDetailResponse, VehicleListResponse
)
from backend.app.schemas.gps_location import GpsLocationResponse
from backend.app.core.config import settings
from backend.app.core.dependencies import get_current_user
from backend.app.core.guards import OwnershipGuard
from backend.app.domain.travel.segments import total_distance
from backend.app.services.travel import TravelService, to_sample
from backend.app.services.vehicles import VehicleService

router = APIRouter(prefix="/vehicles", tags=["Vehicles"])
stats_router = APIRouter(tags=["Vehicles"])
ownership_guard = OwnershipGuard()

VehicleSortField = Literal[
    "created_at", "updated_at", "title", "plate_number", "brand", "model", "price", "year", "status"
]


def vehicle_response(vehicle: Vehicle, distance: float = 0.0) -> VehicleResponse:
    response = VehicleResponse.model_validate(vehicle)
    response.total_distance = distance
    return response


@router.get("")
async def list_vehicles(
    status_filter: Optional[VehicleStatus] = Query(None, alias="status"),
    brand: Optional[str] = Query(None, description="Substring match"),
    model: Optional[str] = Query(None, description="Substring match"),
    year: Optional[int] = Query(None),
    search: Optional[str] = Query(None, description="Substring of title, plate, brand or model"),
    include_deleted: bool = Query(False, description="Include soft-deleted vehicles"),
    sort_by: VehicleSortField = Query("created_at"),
    sort_order: Literal["asc", "desc"] = Query("desc"),
    page: int = Query(1, ge=1, description="Page number"),
    per_page: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size, description="Items per page"),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    List vehicles with filters, sorting and pagination.

    Non-admins only see their own vehicles. Every item carries its
    total travelled distance.
    """
    query = select(Vehicle)

    owner_filter = ownership_guard.filter_by_ownership(current_user)
    if owner_filter is not None:
        query = query.where(Vehicle.user_id == owner_filter)

    if not include_deleted:
        query = query.where(Vehicle.deleted_at.is_(None))

    if status_filter:
        query = query.where(Vehicle.status == status_filter)
    if brand:
        query = query.where(Vehicle.brand.ilike(f"%{brand}%"))
    if model:
        query = query.where(Vehicle.model.ilike(f"%{model}%"))
    if year is not None:
        query = query.where(Vehicle.year == year)
    if search:
        pattern = f"%{search}%"
        query = query.where(or_(
            Vehicle.title.ilike(pattern),
            Vehicle.plate_number.ilike(pattern),
            Vehicle.brand.ilike(pattern),
            Vehicle.model.ilike(pattern)
        ))

    total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar()

    column = getattr(Vehicle, sort_by)
    order = column.asc() if sort_order == "asc" else column.desc()
    offset = (page - 1) * per_page
    result = await db.execute(query.order_by(order, Vehicle.id).offset(offset).limit(per_page))
    vehicles = result.scalars().all()

    distances = await TravelService.get_total_distances(db, [v.id for v in vehicles])

    return {
        "success": True,
        "data": VehicleListResponse(
            vehicles=[vehicle_response(v, distances.get(v.id, 0.0)) for v in vehicles],
            total=total,
            page=page,
            per_page=per_page,
            last_page=max(1, math.ceil(total / per_page))
        )
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_vehicle(
    vehicle_data: VehicleCreate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Register a new vehicle owned by the authenticated user.
    """
    await VehicleService.ensure_plate_available(db, vehicle_data.plate_number)

    vehicle = Vehicle(user_id=current_user["user_id"], **vehicle_data.model_dump())
    db.add(vehicle)
    await db.commit()
    await db.refresh(vehicle)

    return {
        "success": True,
        "message": "Vehicle created successfully",
        "data": vehicle_response(vehicle)
    }


@router.get("/{vehicle_id}")
async def get_vehicle(
    vehicle_id: int = Path(..., description="Vehicle ID"),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Get a vehicle with its GPS history and total travelled distance.
    """
    vehicle = await VehicleService.get_accessible_vehicle(db, vehicle_id, current_user)

    locations = await TravelService.load_locations(db, vehicle.id)
    detail = VehicleDetailResponse.model_validate(vehicle)
    detail.gps_locations = [GpsLocationResponse.model_validate(loc) for loc in locations]
    detail.total_distance = total_distance([to_sample(loc) for loc in locations])

    return {"success": True, "data": detail}


@router.api_route("/{vehicle_id}", methods=["PUT", "PATCH"])
async def update_vehicle(
    vehicle_data: VehicleUpdate,
    vehicle_id: int = Path(..., description="Vehicle ID"),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Update vehicle details. Only provided fields change.
    """
    vehicle = await VehicleService.get_accessible_vehicle(db, vehicle_id, current_user)

    update_data = vehicle_data.model_dump(exclude_unset=True)
    if update_data.get("plate_number"):
        await VehicleService.ensure_plate_available(db, update_data["plate_number"], exclude_vehicle_id=vehicle.id)

    for field, value in update_data.items():
        # Required columns can't be cleared; image can
        if value is not None or field == "image":
            setattr(vehicle, field, value)

    await db.commit()
    await db.refresh(vehicle)

    distance = await TravelService.get_total_distance(db, vehicle.id)
    return {
        "success": True,
        "message": "Vehicle updated successfully",
        "data": vehicle_response(vehicle, distance)
    }


@router.delete("/{vehicle_id}")
async def delete_vehicle(
    vehicle_id: int = Path(..., description="Vehicle ID"),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Soft delete a vehicle. GPS history is kept for a later restore.
    """
    vehicle = await VehicleService.get_accessible_vehicle(db, vehicle_id, current_user)

    vehicle.deleted_at = datetime.now(timezone.utc)
    await db.commit()

    return {"success": True, "message": "Vehicle deleted successfully"}


@router.post("/{vehicle_id}/restore")
async def restore_vehicle(
    vehicle_id: int = Path(..., description="Vehicle ID"),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Restore a soft-deleted vehicle.
    """
    vehicle = await VehicleService.get_accessible_vehicle(db, vehicle_id, current_user, include_deleted=True)

    vehicle.deleted_at = None
    await db.commit()
    await db.refresh(vehicle)

    distance = await TravelService.get_total_distance(db, vehicle.id)
    return {
        "success": True,
        "message": "Vehicle restored successfully",
        "data": vehicle_response(vehicle, distance)
    }


@stats_router.get("/vehicles-statistics")
async def vehicle_statistics(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Vehicle counts for the dashboard (own vehicles, or all for admins).
    """
    return {"success": True, "data": await VehicleService.get_statistics(db, current_user)}
