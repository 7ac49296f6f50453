"""
Redis connection for the token blacklist.

Logout and refresh write revoked tokens here; every authenticated
request reads from it.
"""

import logging
import redis.asyncio as redis
from redis.exceptions import RedisError
from backend.app.core.config import settings

logger = logging.getLogger(__name__)

redis_client = redis.from_url(
    settings.redis_url,
    decode_responses=settings.redis_decode_responses,
)


async def get_redis():
    """
    Current Redis client.

    Looked up on every call so tests can swap the module-level client.
    """
    return redis_client


async def ping_redis() -> bool:
    """True if Redis answers a PING (used by /health)."""
    try:
        return bool(await redis_client.ping())
    except (RedisError, OSError) as e:
        logger.warning("Redis ping failed: %s", e)
        return False
