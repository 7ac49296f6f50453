"""
Vehicle Pydantic schemas.

Defines request and response models for vehicle management.
"""

from pydantic import BaseModel, Field, field_validator
from datetime import date, datetime
from typing import Optional, List, Dict
from backend.app.models.enums import VehicleStatus
from backend.app.schemas.gps_location import GpsLocationResponse

IMAGE_URL_PATTERN = r"^https?://\S+$"


def _check_year(value: Optional[int]) -> Optional[int]:
    if value is not None and value > date.today().year + 1:
        raise ValueError(f"Year must not be later than {date.today().year + 1}")
    return value


class VehicleCreate(BaseModel):
    """Schema for registering a new vehicle."""
    title: str = Field(..., min_length=1, max_length=255)
    plate_number: str = Field(..., min_length=1, max_length=100, description="Unique registration plate")
    brand: str = Field(..., min_length=1, max_length=255)
    model: str = Field(..., min_length=1, max_length=255)
    price: float = Field(..., ge=0)
    year: int = Field(..., ge=1900)
    status: VehicleStatus
    image: Optional[str] = Field(None, max_length=2048, pattern=IMAGE_URL_PATTERN, description="Image URL")

    @field_validator("year")
    @classmethod
    def year_not_in_future(cls, value):
        return _check_year(value)


class VehicleUpdate(BaseModel):
    """Schema for updating an existing vehicle (all fields optional)."""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    plate_number: Optional[str] = Field(None, min_length=1, max_length=100)
    brand: Optional[str] = Field(None, min_length=1, max_length=255)
    model: Optional[str] = Field(None, min_length=1, max_length=255)
    price: Optional[float] = Field(None, ge=0)
    year: Optional[int] = Field(None, ge=1900)
    status: Optional[VehicleStatus] = None
    image: Optional[str] = Field(None, max_length=2048, pattern=IMAGE_URL_PATTERN)

    @field_validator("year")
    @classmethod
    def year_not_in_future(cls, value):
        return _check_year(value)


class VehicleResponse(BaseModel):
    """Schema for vehicle response."""
    id: int
    user_id: int
    title: str
    plate_number: str
    brand: str
    model: str
    price: float
    year: int
    status: VehicleStatus
    image: Optional[str]
    total_distance: float = 0.0
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class VehicleDetailResponse(VehicleResponse):
    """Vehicle with its GPS history (ascending by timestamp)."""
    gps_locations: List[GpsLocationResponse] = []


class VehicleListResponse(BaseModel):
    """Schema for paginated vehicle list."""
    vehicles: List[VehicleResponse]
    total: int
    page: int
    per_page: int
    last_page: int


class VehicleStatistics(BaseModel):
    """Vehicle counts for the dashboard."""
    total_vehicles: int
    vehicles_by_status: Dict[str, int]
    vehicles_by_brand: Dict[str, int]
