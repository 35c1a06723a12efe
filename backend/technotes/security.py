"""
Password hashing with bcrypt.

bcrypt embeds a per-password random salt in its output, so two users with the
same password still get different digests. Hashing is CPU-bound by design, so
the async helpers run it in a worker thread to keep the event loop free.
"""

import asyncio
from typing import Optional

import bcrypt

from technotes.config import settings


def get_password_hash(password: str, rounds: Optional[int] = None) -> str:
    """Hash a plain text password using bcrypt."""
    salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    hashed_password = bcrypt.hashpw(password=password.encode("utf-8"), salt=salt)
    return hashed_password.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain text password against a hashed password."""
    return bcrypt.checkpw(
        plain_password.encode("utf-8"), hashed_password.encode("utf-8")
    )


async def hash_password(password: str) -> str:
    return await asyncio.to_thread(get_password_hash, password)
