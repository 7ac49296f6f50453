"""
Authentication dependencies for FastAPI.

Resolves the bearer token of a request into the principal dict that
every protected endpoint receives:
    {"sub": email, "user_id": int, "role": "ADMIN" | "USER", "jti": ..., "exp": ...}
"""

import logging
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from backend.app.core.exceptions import (
    AuthenticationError,
    InsufficientPermissionsError,
    TokenRevokedError
)
from backend.app.core.jwt import decode_access_token
from backend.app.core.token_revocation import is_token_revoked
from backend.app.db.session import get_db
from backend.app.models.user import User

logger = logging.getLogger(__name__)

# HTTP Bearer security scheme
security = HTTPBearer()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> dict:
    """
    Authenticate the request.

    Checks, in order:
    1. JWT signature and expiry
    2. Token not revoked (logout / refresh)
    3. User still exists and is active

    The role in the returned payload is re-read from the database, so
    role changes apply to tokens issued before them.

    Raises:
        AuthenticationError / TokenRevokedError: 401
        InsufficientPermissionsError: 403 for deactivated accounts
    """
    token = credentials.credentials

    payload = decode_access_token(token)
    if payload is None:
        raise AuthenticationError()

    user_id = payload.get("user_id")
    if not user_id:
        raise AuthenticationError("Invalid token payload")

    if await is_token_revoked(token):
        raise TokenRevokedError()

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if not user:
        logger.info("Token for deleted user %s rejected", user_id)
        raise AuthenticationError("User not found")

    if not user.is_active:
        raise InsufficientPermissionsError("User account is inactive")

    payload["role"] = user.role.value
    return payload


async def get_bearer_token(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> str:
    """Raw bearer token of the current request (for logout / refresh)."""
    return credentials.credentials
