"""
Role and ownership guards.

The principal is the decoded token payload returned by
`get_current_user` and is always passed in explicitly. Admins may act on
every vehicle; regular users only on vehicles whose `user_id` is theirs.
"""

from typing import Optional
from fastapi import Depends
from backend.app.models.enums import UserRole
from backend.app.core.dependencies import get_current_user
from backend.app.core.exceptions import InsufficientPermissionsError


def is_admin(current_user: dict) -> bool:
    return current_user.get("role") == UserRole.ADMIN.value


def require_admin(current_user: dict = Depends(get_current_user)) -> dict:
    """
    Dependency for admin-only endpoints.

    Usage:
        @router.get("/users")
        async def list_users(admin: dict = Depends(require_admin)):
            ...
    """
    if not is_admin(current_user):
        raise InsufficientPermissionsError("Admin access required")

    return current_user


def verify_ownership(resource_owner_id: int, current_user: dict) -> bool:
    """True if the principal owns the resource or is an admin."""
    if is_admin(current_user):
        return True

    return current_user.get("user_id") == resource_owner_id


class OwnershipGuard:
    """
    Ownership checks for vehicles and everything hanging off them
    (GPS locations, travel segments, statistics).

    Usage:
        ownership_guard = OwnershipGuard()

        vehicle = await load_vehicle(db, vehicle_id)
        ownership_guard.enforce(vehicle.user_id, current_user, "vehicle")
    """

    def enforce(
        self,
        resource_owner_id: int,
        current_user: dict,
        resource_name: str = "resource"
    ):
        """
        Raise 403 unless the principal may act on the resource.

        Raises:
            InsufficientPermissionsError
        """
        if not verify_ownership(resource_owner_id, current_user):
            raise InsufficientPermissionsError(
                f"Unauthorized. You do not have permission to access this {resource_name}.",
                details={"resource": resource_name}
            )

    def filter_by_ownership(self, current_user: dict) -> Optional[int]:
        """
        Owner id to scope listing queries by, or None for admins.

        Usage:
            owner_filter = ownership_guard.filter_by_ownership(current_user)
            if owner_filter is not None:
                query = query.where(Vehicle.user_id == owner_filter)
        """
        if is_admin(current_user):
            return None

        return current_user.get("user_id")
