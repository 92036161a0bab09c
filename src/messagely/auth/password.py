"""Password hashing utilities.

bcrypt with a per-hash salt at a configurable cost
(MESSAGELY_BCRYPT_WORK_FACTOR, 2**rounds iterations; 12 is ~250ms).

bcrypt only reads the first 72 bytes of its input. Longer passwords are
refused by `hash` and never match in `verify`, so two passwords that
share a 72-byte prefix cannot stand in for each other.

All bcrypt work is CPU-bound: the async entry points run it on a worker
thread.
"""

import asyncio
from functools import cached_property

import bcrypt

from messagely.errors import ValidationError

MAX_PASSWORD_BYTES = 72


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


def _truncate(password: str) -> str:
    return password.encode("utf-8")[:MAX_PASSWORD_BYTES].decode("utf-8", "ignore")


class PasswordHasher:
    """bcrypt hasher bound to a fixed work factor.

    `verify_or_dummy` makes a lookup for a username that doesn't exist
    cost the same as checking a wrong password: both run one bcrypt
    comparison at the configured cost. The dummy hash is built on first
    use (or by `warm_up` at startup), not in the constructor.
    """

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    @cached_property
    def _dummy_hash(self) -> str:
        return bcrypt.hashpw(
            b"messagely-timing-equalizer", bcrypt.gensalt(rounds=self.rounds)
        ).decode("utf-8")

    def hash(self, password: str) -> str:
        """Hash a password with a fresh salt."""
        if password_too_long(password):
            raise ValidationError(
                f"Password must be at most {MAX_PASSWORD_BYTES} bytes"
            )
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Check a password against a stored bcrypt hash."""
        if password_too_long(password):
            return False
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except (ValueError, TypeError):
            return False

    def verify_or_dummy(self, password: str, password_hash: str | None) -> bool:
        """Verify against password_hash, or burn a dummy check if it is None."""
        if password_hash is None:
            self.verify(_truncate(password), self._dummy_hash)
            return False
        if password_too_long(password):
            # Same cost as a real mismatch.
            self.verify("", password_hash)
            return False
        return self.verify(password, password_hash)

    async def warm_up(self) -> None:
        await asyncio.to_thread(lambda: self._dummy_hash)

    async def hash_async(self, password: str) -> str:
        return await asyncio.to_thread(self.hash, password)

    async def verify_async(self, password: str, password_hash: str | None) -> bool:
        return await asyncio.to_thread(self.verify_or_dummy, password, password_hash)
