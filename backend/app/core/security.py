"""
Password hashing helpers.
"""

import logging
import bcrypt

logger = logging.getLogger(__name__)


def get_password_hash(password: str) -> str:
    """Hash a plain password with a fresh bcrypt salt."""
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a plain password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError as e:
        # Malformed stored hash
        logger.warning("Password verification failed: %s", e)
        return False
