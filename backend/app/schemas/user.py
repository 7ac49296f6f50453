"""
User management schemas (admin endpoints).
"""

from pydantic import BaseModel, EmailStr, Field
from typing import Optional, List
from backend.app.models.enums import UserRole
from backend.app.schemas.auth import UserResponse


class UserCreate(BaseModel):
    """Schema for an admin creating a user."""
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: UserRole = Field(default=UserRole.USER)


class UserUpdate(BaseModel):
    """Schema for updating a user (all fields optional)."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6)
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None


class UserListResponse(BaseModel):
    """Schema for paginated user list."""
    users: List[UserResponse]
    total: int
    page: int
    per_page: int
