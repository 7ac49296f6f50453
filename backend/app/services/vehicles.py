"""
Vehicle lookup and statistics helpers shared by the vehicle, GPS and
travel endpoints.
"""

from typing import Dict, Optional
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.exceptions import ConflictError, ResourceNotFoundError
from backend.app.core.guards import OwnershipGuard
from backend.app.models.enums import VehicleStatus
from backend.app.models.vehicle import Vehicle
from backend.app.schemas.vehicle import VehicleStatistics

ownership_guard = OwnershipGuard()


class VehicleService:

    @staticmethod
    async def get_accessible_vehicle(
        db: AsyncSession,
        vehicle_id: int,
        current_user: dict,
        include_deleted: bool = False
    ) -> Vehicle:
        """
        Fetch a vehicle the principal may act on.

        Raises:
            ResourceNotFoundError: 404 if missing (or soft-deleted, unless include_deleted)
            InsufficientPermissionsError: 403 if the principal neither owns it nor is admin
        """
        query = select(Vehicle).where(Vehicle.id == vehicle_id)
        if not include_deleted:
            query = query.where(Vehicle.deleted_at.is_(None))

        vehicle = (await db.execute(query)).scalar_one_or_none()
        if not vehicle:
            raise ResourceNotFoundError("Vehicle", vehicle_id)

        ownership_guard.enforce(vehicle.user_id, current_user, "vehicle")
        return vehicle

    @staticmethod
    async def ensure_plate_available(
        db: AsyncSession, plate_number: str, exclude_vehicle_id: Optional[int] = None
    ):
        """Plates are unique across all vehicles, soft-deleted ones included."""
        query = select(Vehicle.id).where(Vehicle.plate_number == plate_number)
        if exclude_vehicle_id is not None:
            query = query.where(Vehicle.id != exclude_vehicle_id)
        if (await db.execute(query)).first():
            raise ConflictError("The plate number has already been taken", field="plate_number")

    @staticmethod
    async def get_statistics(db: AsyncSession, current_user: dict) -> VehicleStatistics:
        """Vehicle counts (total, by status, by brand) for the visible fleet."""
        conditions = [Vehicle.deleted_at.is_(None)]
        owner_filter = ownership_guard.filter_by_ownership(current_user)
        if owner_filter is not None:
            conditions.append(Vehicle.user_id == owner_filter)

        total = (await db.execute(
            select(func.count(Vehicle.id)).where(*conditions)
        )).scalar() or 0

        by_status: Dict[str, int] = {s.value: 0 for s in VehicleStatus}
        status_rows = await db.execute(
            select(Vehicle.status, func.count(Vehicle.id)).where(*conditions).group_by(Vehicle.status)
        )
        for vehicle_status, count in status_rows.all():
            by_status[vehicle_status.value] = count

        brand_rows = await db.execute(
            select(Vehicle.brand, func.count(Vehicle.id))
            .where(*conditions)
            .group_by(Vehicle.brand)
            .order_by(Vehicle.brand)
        )

        return VehicleStatistics(
            total_vehicles=total,
            vehicles_by_status=by_status,
            vehicles_by_brand={brand: count for brand, count in brand_rows.all()}
        )
