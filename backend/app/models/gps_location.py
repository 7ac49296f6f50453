"""
GPS Location database model.

Stores the position history of a vehicle, one row per reported ping.
"""

from sqlalchemy import Column, Integer, Float, ForeignKey, DateTime, Index
from sqlalchemy.sql import func
from backend.app.db.session import Base


class GpsLocation(Base):
    """
    GPS Location model.

    Rows are append-only; travel segments are derived from them on read.
    """
    __tablename__ = "gps_locations"
    __table_args__ = (
        Index("ix_gps_locations_vehicle_timestamp", "vehicle_id", "timestamp"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    vehicle_id = Column(Integer, ForeignKey('vehicles.id', ondelete="CASCADE"), nullable=False, index=True)

    # GPS coordinates
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)

    # Timing
    timestamp = Column(DateTime(timezone=True), nullable=False)  # When the position was reported
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<GpsLocation(vehicle_id={self.vehicle_id}, lat={self.latitude}, lng={self.longitude})>"
