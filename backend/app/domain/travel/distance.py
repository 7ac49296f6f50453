"""
Great-circle distance primitive.

Every travel aggregation path (segments, per-vehicle totals, fleet
summaries) measures distance through this module.
"""

import math
from dataclasses import dataclass


# Mean Earth radius in kilometers (spherical model)
EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True)
class GeoPoint:
    """Immutable (latitude, longitude) pair in decimal degrees."""
    latitude: float
    longitude: float


def haversine_distance(a: GeoPoint, b: GeoPoint) -> float:
    """
    Calculate the great-circle distance between two points on Earth.

    Inputs are not validated; callers constrain latitude/longitude
    ranges upstream.

    Args:
        a: Start point
        b: End point

    Returns:
        Distance in kilometers
    """
    d_lat = math.radians(b.latitude - a.latitude)
    d_lon = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(a.latitude)) * math.cos(math.radians(b.latitude)) * math.sin(d_lon / 2) ** 2
    )
    # Rounding can push h a hair past 1 for near-antipodal points
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(max(0.0, 1 - h)))

    return EARTH_RADIUS_KM * c
