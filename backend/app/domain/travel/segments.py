"""
Travel Segment Aggregation (Domain Logic).

Turns a timestamp-ordered stream of GPS samples into travel segments
(consecutive sample pairs) with distance and elapsed time, and rolls
those segments up per vehicle and per fleet.

Everything here is pure: no database access, no authorization. Callers
hand in samples already sorted ascending by timestamp; nothing is
re-sorted or validated here.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from backend.app.domain.travel.distance import GeoPoint, haversine_distance


INSUFFICIENT_DATA_MESSAGE = "Not enough GPS locations to calculate travel segments"

# Distances and totals are reported with 2 decimal places
DISTANCE_PRECISION = 2

_ONE_MINUTE = timedelta(minutes=1)


@dataclass(frozen=True)
class LocationSample:
    """A single recorded GPS position for a vehicle."""
    id: Any
    vehicle_id: Any
    point: GeoPoint
    timestamp: datetime

    @property
    def latitude(self) -> float:
        return self.point.latitude

    @property
    def longitude(self) -> float:
        return self.point.longitude


@dataclass(frozen=True)
class TravelSegment:
    """Great-circle leg between two temporally adjacent samples."""
    start: LocationSample
    end: LocationSample
    distance_km: float
    duration: timedelta

    @property
    def duration_minutes(self) -> int:
        """
        Whole minutes between start and end.

        Fractional minutes are dropped (truncated toward zero), so
        out-of-order input yields a negative count instead of an error.
        """
        minutes = abs(self.duration) // _ONE_MINUTE
        return -minutes if self.duration < timedelta(0) else minutes


@dataclass(frozen=True)
class TravelSummary:
    """Segments and distance totals for one vehicle."""
    segments: Tuple[TravelSegment, ...] = ()
    total_distance_km: float = 0.0
    note: Optional[str] = None

    @property
    def segment_count(self) -> int:
        return len(self.segments)

    @property
    def is_empty(self) -> bool:
        return not self.segments


@dataclass(frozen=True)
class VehicleRef:
    """Vehicle identity fields echoed in fleet summaries."""
    id: Any
    title: str
    plate_number: str
    brand: Optional[str] = None
    model: Optional[str] = None


@dataclass(frozen=True)
class VehicleTravel:
    """Fleet summary entry: one vehicle with its travel summary."""
    vehicle: VehicleRef
    summary: TravelSummary = field(default_factory=TravelSummary)


def build_segment(start: LocationSample, end: LocationSample) -> TravelSegment:
    """Measure a single leg between two samples."""
    distance = haversine_distance(start.point, end.point)
    return TravelSegment(
        start=start,
        end=end,
        distance_km=round(distance, DISTANCE_PRECISION),
        duration=end.timestamp - start.timestamp,
    )


def build_segments(samples: Sequence[LocationSample]) -> List[TravelSegment]:
    """
    Pair each sample with its predecessor, in the order given.

    N samples always yield max(N - 1, 0) segments.
    """
    return [
        build_segment(samples[i - 1], samples[i])
        for i in range(1, len(samples))
    ]


def sum_segment_distances(segments: Iterable[TravelSegment]) -> float:
    """
    Total of the already-rounded per-segment distances, rounded again.

    The total can drift slightly from the raw sum over long histories.
    """
    return round(sum(segment.distance_km for segment in segments), DISTANCE_PRECISION)


def summarize_vehicle(samples: Sequence[LocationSample]) -> TravelSummary:
    """
    Build the travel summary for a single vehicle.

    Fewer than two samples is a valid outcome, not an error: the summary
    comes back empty with an explanatory note.
    """
    if len(samples) < 2:
        return TravelSummary(note=INSUFFICIENT_DATA_MESSAGE)

    segments = build_segments(samples)
    return TravelSummary(
        segments=tuple(segments),
        total_distance_km=sum_segment_distances(segments),
    )


def total_distance(samples: Sequence[LocationSample]) -> float:
    """Total travelled distance in km (0.0 with fewer than two samples)."""
    return summarize_vehicle(samples).total_distance_km


def summarize_fleet(
    vehicles: Iterable[Tuple[VehicleRef, Sequence[LocationSample]]]
) -> List[VehicleTravel]:
    """
    Build travel summaries for every vehicle in a fleet.

    Vehicles with fewer than two samples are left out entirely. The
    remaining entries keep the input vehicle order.
    """
    travels = []
    for vehicle, samples in vehicles:
        if len(samples) < 2:
            continue
        travels.append(VehicleTravel(vehicle=vehicle, summary=summarize_vehicle(samples)))
    return travels
