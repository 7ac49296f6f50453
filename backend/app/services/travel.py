"""
Travel Service.

Loads GPS history from the database (one ordered snapshot per request)
and hands it to the travel domain for segment and distance aggregation.
READ-ONLY: nothing here writes to the database.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.guards import OwnershipGuard
from backend.app.domain.travel.distance import GeoPoint
from backend.app.domain.travel.segments import (
    LocationSample, TravelSummary, VehicleRef, VehicleTravel,
    summarize_vehicle, summarize_fleet, total_distance
)
from backend.app.models.gps_location import GpsLocation
from backend.app.models.vehicle import Vehicle

logger = logging.getLogger(__name__)
ownership_guard = OwnershipGuard()


def to_sample(location: GpsLocation) -> LocationSample:
    """Map a stored GPS row onto the domain sample type."""
    return LocationSample(
        id=location.id,
        vehicle_id=location.vehicle_id,
        point=GeoPoint(latitude=location.latitude, longitude=location.longitude),
        timestamp=location.timestamp,
    )


def to_vehicle_ref(vehicle: Vehicle) -> VehicleRef:
    return VehicleRef(
        id=vehicle.id,
        title=vehicle.title,
        plate_number=vehicle.plate_number,
        brand=vehicle.brand,
        model=vehicle.model,
    )


class TravelService:

    @staticmethod
    async def load_locations(db: AsyncSession, vehicle_id: int) -> Sequence[GpsLocation]:
        """GPS rows of one vehicle, ascending by timestamp (id breaks ties)."""
        result = await db.execute(
            select(GpsLocation)
            .where(GpsLocation.vehicle_id == vehicle_id)
            .order_by(GpsLocation.timestamp.asc(), GpsLocation.id.asc())
        )
        return result.scalars().all()

    @staticmethod
    async def load_samples(db: AsyncSession, vehicle_id: int) -> List[LocationSample]:
        locations = await TravelService.load_locations(db, vehicle_id)
        return [to_sample(loc) for loc in locations]

    @staticmethod
    async def load_samples_by_vehicle(
        db: AsyncSession, vehicle_ids: Sequence[int]
    ) -> Dict[int, List[LocationSample]]:
        """
        Ordered samples for many vehicles in a single query.

        Vehicles without any samples map to an empty list.
        """
        samples = {vehicle_id: [] for vehicle_id in vehicle_ids}
        if not vehicle_ids:
            return samples

        result = await db.execute(
            select(GpsLocation)
            .where(GpsLocation.vehicle_id.in_(vehicle_ids))
            .order_by(GpsLocation.vehicle_id, GpsLocation.timestamp.asc(), GpsLocation.id.asc())
        )
        grouped = defaultdict(list)
        for location in result.scalars().all():
            grouped[location.vehicle_id].append(to_sample(location))
        samples.update(grouped)
        return samples

    @staticmethod
    async def get_segments(db: AsyncSession, vehicle: Vehicle) -> TravelSummary:
        """Travel segments of a single vehicle (authorization is the caller's job)."""
        samples = await TravelService.load_samples(db, vehicle.id)
        summary = summarize_vehicle(samples)
        logger.debug(
            "Vehicle %s: %d samples, %d segments, %.2f km",
            vehicle.id, len(samples), summary.segment_count, summary.total_distance_km
        )
        return summary

    @staticmethod
    async def get_total_distance(db: AsyncSession, vehicle_id: int) -> float:
        samples = await TravelService.load_samples(db, vehicle_id)
        return total_distance(samples)

    @staticmethod
    async def get_total_distances(db: AsyncSession, vehicle_ids: Sequence[int]) -> Dict[int, float]:
        """Total travelled km per vehicle, for listing pages."""
        samples = await TravelService.load_samples_by_vehicle(db, vehicle_ids)
        return {vehicle_id: total_distance(vehicle_samples) for vehicle_id, vehicle_samples in samples.items()}

    @staticmethod
    async def get_fleet_travels(db: AsyncSession, current_user: dict) -> List[VehicleTravel]:
        """
        Travel summaries for every vehicle visible to the principal.

        Admins see all vehicles, everyone else only their own. Soft-deleted
        vehicles are skipped; vehicles are ordered by id. Vehicles with
        fewer than two samples do not appear in the result.
        """
        query = select(Vehicle).where(Vehicle.deleted_at.is_(None))
        owner_filter = ownership_guard.filter_by_ownership(current_user)
        if owner_filter is not None:
            query = query.where(Vehicle.user_id == owner_filter)

        result = await db.execute(query.order_by(Vehicle.id))
        vehicles = result.scalars().all()

        samples = await TravelService.load_samples_by_vehicle(db, [v.id for v in vehicles])
        return summarize_fleet(
            (to_vehicle_ref(vehicle), samples[vehicle.id]) for vehicle in vehicles
        )
