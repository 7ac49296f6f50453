"""
Vehicle database model.

Users register vehicles; GPS locations are recorded against them.
"""

from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, Enum
from sqlalchemy.sql import func
from backend.app.db.session import Base
from backend.app.models.enums import VehicleStatus


class Vehicle(Base):
    """
    Vehicle model.

    Deletion is soft: `deleted_at` is set and the row is hidden from
    listings until restored.
    """
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Ownership - Vehicle belongs to a user
    user_id = Column(Integer, ForeignKey('users.id', ondelete="CASCADE"), nullable=False, index=True)

    # Identification
    title = Column(String(255), nullable=False)
    plate_number = Column(String(100), unique=True, nullable=False, index=True)
    brand = Column(String(255), nullable=False)
    model = Column(String(255), nullable=False)
    image = Column(String(2048), nullable=True)  # Image URL only, no file storage

    # Listing details
    price = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    year = Column(Integer, nullable=False)
    status = Column(
        Enum(VehicleStatus, values_callable=lambda e: [member.value for member in e]),
        default=VehicleStatus.NOT_PUBLISHED,
        nullable=False,
        index=True
    )

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True, index=True)

    def __repr__(self):
        return f"<Vehicle(id={self.id}, plate='{self.plate_number}', owner_id={self.user_id})>"
