"""
Token Revocation System using Redis.

Implements token blacklisting so logged-out (or refreshed) JWT tokens
stop working immediately instead of at expiry.
"""

import logging
from redis.exceptions import RedisError
from backend.app.core.redis_client import get_redis
from backend.app.core.jwt import token_expires_in_seconds

logger = logging.getLogger(__name__)

# Redis key prefix for blacklisted tokens
TOKEN_BLACKLIST_PREFIX = "blacklist:token:"


async def revoke_token(token: str, user_id: int) -> bool:
    """
    Revoke a specific JWT token by adding it to the blacklist.

    Args:
        token: The JWT token string to revoke
        user_id: User ID who owns the token

    Returns:
        True if successfully revoked, False otherwise
    """
    try:
        client = await get_redis()
        # Tokens expire on their own; keep the entry no longer than that
        await client.setex(
            f"{TOKEN_BLACKLIST_PREFIX}{token}",
            token_expires_in_seconds(),
            str(user_id)
        )
        return True
    except (RedisError, OSError) as e:
        logger.error("Error revoking token for user %s: %s", user_id, e)
        return False


async def is_token_revoked(token: str) -> bool:
    """
    Check if a token has been revoked.

    Fails open: if Redis is unreachable the token is treated as valid
    and the failure is logged.
    """
    try:
        client = await get_redis()
        exists = await client.exists(f"{TOKEN_BLACKLIST_PREFIX}{token}")
        return exists > 0
    except (RedisError, OSError) as e:
        logger.warning("Error checking token revocation: %s", e)
        return False
