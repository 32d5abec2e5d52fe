"""
Password hashing and verification.

bcrypt with a fresh random salt per hash. The cost factor comes from
SECURITY__BCRYPT_ROUNDS unless given explicitly.

Contract:
- hash_password trims surrounding whitespace before hashing
- hash_password(None) is a programming error: callers validate presence first
- verify_password never raises; a corrupt or missing hash simply fails
- bcrypt only reads the first 72 bytes of a secret
"""

import asyncio

import bcrypt
from loguru import logger

from ..exceptions import HashingFault
from ..settings import settings

BCRYPT_MAX_BYTES = 72


def _encode_secret(secret: str) -> bytes:
    return secret.strip().encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str | None, rounds: int | None = None) -> str:
    """
    Hash a cleartext password for storage.

    Args:
        password: Cleartext password
        rounds: bcrypt cost factor (defaults to settings.security.bcrypt_rounds)

    Returns:
        bcrypt hash string ($2b$...)

    Raises:
        HashingFault: If no password is given
    """
    if password is None:
        raise HashingFault("Cannot hash an absent password; validate the payload first")

    salt = bcrypt.gensalt(rounds=rounds or settings.security.bcrypt_rounds)
    return bcrypt.hashpw(_encode_secret(password), salt).decode("utf-8")


async def hash_password_async(password: str | None, rounds: int | None = None) -> str:
    """Hash a password in a worker thread so the event loop keeps running."""
    return await asyncio.to_thread(hash_password, password, rounds)


def verify_password(candidate: str, stored_hash: str | None) -> bool:
    """
    Check a cleartext candidate against a stored bcrypt hash.

    Comparison is constant-time (bcrypt.checkpw).

    Returns:
        True if the candidate matches, False otherwise (including corrupt hashes)
    """
    if not stored_hash or candidate is None:
        return False

    try:
        return bcrypt.checkpw(_encode_secret(candidate), stored_hash.encode("utf-8"))
    except (ValueError, TypeError) as e:
        logger.warning(f"Password verification failed on malformed hash: {e}")
        return False
