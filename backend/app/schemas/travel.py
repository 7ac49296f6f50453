"""
Travel segment schemas.

Serialization of the travel domain objects for API responses.
"""

from pydantic import BaseModel
from datetime import datetime
from typing import List

from backend.app.domain.travel.segments import (
    LocationSample, TravelSegment, TravelSummary, VehicleRef, VehicleTravel
)


class SegmentPoint(BaseModel):
    """Segment endpoint as reported in fleet summaries (no sample id)."""
    latitude: float
    longitude: float
    timestamp: datetime

    @classmethod
    def from_sample(cls, sample: LocationSample) -> "SegmentPoint":
        return cls(latitude=sample.latitude, longitude=sample.longitude, timestamp=sample.timestamp)


class SegmentLocation(SegmentPoint):
    """Segment endpoint echoing the GPS sample it came from."""
    id: int

    @classmethod
    def from_sample(cls, sample: LocationSample) -> "SegmentLocation":
        return cls(
            id=sample.id,
            latitude=sample.latitude,
            longitude=sample.longitude,
            timestamp=sample.timestamp
        )


class TravelSegmentResponse(BaseModel):
    """One leg of a single vehicle's travel."""
    start_location: SegmentLocation
    end_location: SegmentLocation
    distance_km: float
    duration_minutes: int

    @classmethod
    def from_segment(cls, segment: TravelSegment) -> "TravelSegmentResponse":
        return cls(
            start_location=SegmentLocation.from_sample(segment.start),
            end_location=SegmentLocation.from_sample(segment.end),
            distance_km=segment.distance_km,
            duration_minutes=segment.duration_minutes
        )


class FleetSegmentResponse(BaseModel):
    """One leg inside a fleet travel summary."""
    start_location: SegmentPoint
    end_location: SegmentPoint
    distance_km: float

    @classmethod
    def from_segment(cls, segment: TravelSegment) -> "FleetSegmentResponse":
        return cls(
            start_location=SegmentPoint.from_sample(segment.start),
            end_location=SegmentPoint.from_sample(segment.end),
            distance_km=segment.distance_km
        )


class VehicleIdentity(BaseModel):
    id: int
    title: str
    plate_number: str


class FleetVehicleIdentity(VehicleIdentity):
    brand: str
    model: str


class TravelSegmentsData(BaseModel):
    """Travel segments of one vehicle."""
    vehicle: VehicleIdentity
    segments: List[TravelSegmentResponse]
    total_distance_km: float
    total_segments: int

    @classmethod
    def build(cls, vehicle: VehicleRef, summary: TravelSummary) -> "TravelSegmentsData":
        return cls(
            vehicle=VehicleIdentity(id=vehicle.id, title=vehicle.title, plate_number=vehicle.plate_number),
            segments=[TravelSegmentResponse.from_segment(s) for s in summary.segments],
            total_distance_km=summary.total_distance_km,
            total_segments=summary.segment_count
        )


class FleetTravelEntry(BaseModel):
    """One vehicle in the fleet-wide travel listing."""
    vehicle: FleetVehicleIdentity
    total_distance_km: float
    segments_count: int
    segments: List[FleetSegmentResponse]

    @classmethod
    def from_travel(cls, travel: VehicleTravel) -> "FleetTravelEntry":
        vehicle = travel.vehicle
        return cls(
            vehicle=FleetVehicleIdentity(
                id=vehicle.id,
                title=vehicle.title,
                plate_number=vehicle.plate_number,
                brand=vehicle.brand,
                model=vehicle.model
            ),
            total_distance_km=travel.summary.total_distance_km,
            segments_count=travel.summary.segment_count,
            segments=[FleetSegmentResponse.from_segment(s) for s in travel.summary.segments]
        )
