"""
User Management API Endpoints (admin only).
"""

from typing import Literal, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query, Path
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_
from backend.app.db.session import get_db
from backend.app.models.user import User
from backend.app.schemas.auth import UserResponse
from backend.app.schemas.user import UserCreate, UserUpdate, UserListResponse
from backend.app.core.config import settings
from backend.app.core.guards import require_admin
from backend.app.core.security import get_password_hash
from backend.app.core.exceptions import ConflictError, ResourceNotFoundError

router = APIRouter(prefix="/users", tags=["Users"])

USER_SORT_COLUMNS = {
    "id": User.id,
    "name": User.name,
    "email": User.email,
    "created_at": User.created_at,
}


async def get_user_or_404(db: AsyncSession, user_id: int) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if not user:
        raise ResourceNotFoundError("User", user_id)
    return user


async def ensure_email_available(db: AsyncSession, email: str, exclude_user_id: Optional[int] = None):
    query = select(User.id).where(User.email == email)
    if exclude_user_id is not None:
        query = query.where(User.id != exclude_user_id)
    if (await db.execute(query)).first():
        raise ConflictError("Email already registered", field="email")


@router.get("", response_model=UserListResponse)
async def list_users(
    search: Optional[str] = Query(None, description="Substring of name or email"),
    sort_by: Literal["id", "name", "email", "created_at"] = Query("created_at"),
    sort_order: Literal["asc", "desc"] = Query("desc"),
    page: int = Query(1, ge=1, description="Page number"),
    per_page: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size, description="Items per page"),
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    List all users (admin-only).
    """
    query = select(User)
    if search:
        pattern = f"%{search}%"
        query = query.where(or_(User.name.ilike(pattern), User.email.ilike(pattern)))

    total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar()

    column = USER_SORT_COLUMNS[sort_by]
    order = column.asc() if sort_order == "asc" else column.desc()
    offset = (page - 1) * per_page
    result = await db.execute(query.order_by(order, User.id).offset(offset).limit(per_page))

    return UserListResponse(
        users=[UserResponse.model_validate(user) for user in result.scalars().all()],
        total=total,
        page=page,
        per_page=per_page
    )


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Create a user with any role (admin-only)."""
    await ensure_email_available(db, user_data.email)

    user = User(
        name=user_data.name,
        email=user_data.email,
        hashed_password=get_password_hash(user_data.password),
        role=user_data.role,
        is_active=True
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)

    return UserResponse.model_validate(user)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int = Path(..., description="User ID"),
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Get a single user (admin-only)."""
    return UserResponse.model_validate(await get_user_or_404(db, user_id))


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_data: UserUpdate,
    user_id: int = Path(..., description="User ID"),
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Update a user (admin-only). Only provided fields change.
    """
    user = await get_user_or_404(db, user_id)

    update_data = user_data.model_dump(exclude_unset=True)
    if update_data.get("email"):
        await ensure_email_available(db, update_data["email"], exclude_user_id=user.id)

    password = update_data.pop("password", None)
    if password:
        user.hashed_password = get_password_hash(password)

    for field, value in update_data.items():
        if value is not None:
            setattr(user, field, value)

    await db.commit()
    await db.refresh(user)

    return UserResponse.model_validate(user)


@router.delete("/{user_id}")
async def delete_user(
    user_id: int = Path(..., description="User ID"),
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Delete a user and, by cascade, their vehicles (admin-only)."""
    if user_id == admin["user_id"]:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot delete your own account"
        )

    user = await get_user_or_404(db, user_id)
    await db.delete(user)
    await db.commit()

    return {"success": True, "message": "User deleted successfully"}
