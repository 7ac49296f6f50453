"""
GPS location schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class GpsLocationCreate(BaseModel):
    """Schema for recording a GPS ping."""
    vehicle_id: int = Field(..., description="Vehicle the position belongs to")
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    timestamp: Optional[datetime] = Field(None, description="When the position was reported (defaults to now)")


class GpsLocationResponse(BaseModel):
    """GPS location response."""
    id: int
    vehicle_id: int
    latitude: float
    longitude: float
    timestamp: datetime
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
