"""Password hashing and verification with bcrypt."""

from __future__ import annotations

import asyncio
import secrets
from functools import lru_cache

import bcrypt

from ..config import Settings

# Default work factor; changing it only affects newly written hashes.
BCRYPT_ROUNDS = 12

# bcrypt ignores everything past 72 bytes and newer releases reject longer input.
BCRYPT_MAX_BYTES = 72


def _encode(plain_password: str) -> bytes:
    return plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(plain_password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    return bcrypt.hashpw(_encode(plain_password), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str | None) -> bool:
    """Verify a plain password against a stored hash.

    ``bcrypt.checkpw`` compares in constant time. A missing or malformed hash
    never verifies.
    """
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(_encode(plain_password), hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


@lru_cache(maxsize=None)
def dummy_hash(rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash of a random secret, computed once per work factor, that nothing can match."""
    return hash_password(secrets.token_urlsafe(16), rounds)


class PasswordHasher:
    """Async facade that keeps bcrypt's CPU work off the event loop."""

    def __init__(self, rounds: int = BCRYPT_ROUNDS):
        self.rounds = rounds

    @classmethod
    def from_settings(cls, settings: Settings) -> PasswordHasher:
        return cls(rounds=settings.bcrypt_rounds)

    async def hash(self, plain_password: str) -> str:
        return await asyncio.to_thread(hash_password, plain_password, self.rounds)

    async def verify(self, plain_password: str, hashed: str | None) -> bool:
        return await asyncio.to_thread(verify_password, plain_password, hashed)

    async def verify_dummy(self, plain_password: str) -> bool:
        """Spend the same bcrypt work as ``verify`` on a hash that never matches."""
        dummy = await asyncio.to_thread(dummy_hash, self.rounds)
        await self.verify(plain_password, dummy)
        return False
