"""
Authentication API endpoints.

Provides register, login, logout, refresh and profile endpoints.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from backend.app.db.session import get_db
from backend.app.models.user import User
from backend.app.models.enums import UserRole
from backend.app.schemas.auth import UserRegister, UserLogin, TokenResponse, UserResponse
from backend.app.core.security import get_password_hash, verify_password
from backend.app.core.jwt import create_access_token, token_expires_in_seconds
from backend.app.core.dependencies import get_current_user, get_bearer_token
from backend.app.core.token_revocation import revoke_token

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = logging.getLogger(__name__)


def issue_token(user: User, message: str) -> TokenResponse:
    """Build the token response for a user."""
    jwt_payload = {
        "sub": user.email,
        "user_id": user.id,
        "role": user.role.value,
    }

    return TokenResponse(
        message=message,
        access_token=create_access_token(data=jwt_payload),
        token_type="bearer",
        expires_in=token_expires_in_seconds(),
        user=UserResponse.model_validate(user)
    )


async def load_user(db: AsyncSession, user_id: int) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return user


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    db: AsyncSession = Depends(get_db)
):
    """
    Register a new user and log them in.

    Self-registered accounts always get the USER role; admins are
    created by other admins or by the seeding script.
    """
    result = await db.execute(select(User).where(User.email == user_data.email))
    if result.scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )

    new_user = User(
        name=user_data.name,
        email=user_data.email,
        hashed_password=get_password_hash(user_data.password),
        role=UserRole.USER,
        is_active=True
    )

    db.add(new_user)
    await db.commit()
    await db.refresh(new_user)

    logger.info("Registered user %s", new_user.id)
    return issue_token(new_user, "User registered successfully")


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db)
):
    """
    Login user and return JWT token.
    """
    result = await db.execute(select(User).where(User.email == credentials.email))
    user = result.scalar_one_or_none()

    if not user or not verify_password(credentials.password, user.hashed_password):
        logger.warning("Failed login for %s", credentials.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user account"
        )

    return issue_token(user, "Login successful")


@router.post("/logout")
async def logout(
    current_user: dict = Depends(get_current_user),
    token: str = Depends(get_bearer_token)
):
    """
    Log the user out by revoking the presented token.
    """
    if not await revoke_token(token, current_user["user_id"]):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not revoke token, try again later"
        )

    return {"success": True, "message": "Successfully logged out"}


@router.post("/refresh", response_model=TokenResponse)
async def refresh(
    current_user: dict = Depends(get_current_user),
    token: str = Depends(get_bearer_token),
    db: AsyncSession = Depends(get_db)
):
    """
    Exchange a valid token for a fresh one; the old token is revoked.
    """
    user = await load_user(db, current_user["user_id"])

    if not await revoke_token(token, user.id):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not revoke token, try again later"
        )

    return issue_token(user, "Token refreshed")


@router.get("/profile")
async def get_profile(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Get current authenticated user information.
    """
    user = await load_user(db, current_user["user_id"])
    return {"success": True, "user": UserResponse.model_validate(user)}
