"""Password hashing: bcrypt over a SHA-256 pre-hash.

The pre-hash gives bcrypt a fixed 44-byte input, so passwords longer than
bcrypt's 72-byte limit are not silently truncated.

bcrypt is CPU-bound; request handlers use the *_async variants, which run
in the default thread pool so the event loop is not blocked.
"""

import asyncio
import base64
import hashlib

import bcrypt

# Lazily computed; compared against when the account has no usable hash so
# "unknown user" and "wrong password" cost the same.
_dummy_hash: str | None = None


def _prehash(password: str) -> bytes:
    return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())


def hash_password(password: str, rounds: int = 12) -> str:
    """Return a bcrypt hash of password."""
    hashed = bcrypt.hashpw(_prehash(password), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Return True if plain_password matches hashed_password. Malformed hashes never match."""
    try:
        return bool(
            bcrypt.checkpw(_prehash(plain_password), hashed_password.encode("utf-8"))
        )
    except (ValueError, TypeError):
        return False


async def verify_password_async(plain_password: str, hashed_password: str | None) -> bool:
    """Verify in a worker thread. A None hash burns one dummy comparison and returns False."""
    global _dummy_hash
    if hashed_password is None:
        if _dummy_hash is None:
            _dummy_hash = await asyncio.to_thread(hash_password, "not-a-real-password")
        await asyncio.to_thread(verify_password, plain_password, _dummy_hash)
        return False
    return await asyncio.to_thread(verify_password, plain_password, hashed_password)


class BcryptPasswordHasher:
    """IPasswordHasher over the functions above. rounds is lowered in tests."""

    def __init__(self, rounds: int = 12) -> None:
        self._rounds = rounds

    async def hash(self, password: str) -> str:
        return await asyncio.to_thread(hash_password, password, self._rounds)

    async def verify(self, password: str, hashed: str | None) -> bool:
        return await verify_password_async(password, hashed)
