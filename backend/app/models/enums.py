"""
Enumerations shared by models and schemas.
"""

import enum


class UserRole(str, enum.Enum):
    """
    User role enumeration.

    Roles:
        ADMIN: Sees and manages every vehicle and user
        USER: Manages only their own vehicles (default role)
    """
    ADMIN = "ADMIN"
    USER = "USER"


class VehicleStatus(str, enum.Enum):
    """Listing status of a vehicle."""
    PUBLISHED = "Published"
    NOT_PUBLISHED = "Not Published"
