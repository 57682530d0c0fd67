"""bcrypt password hashing."""

import asyncio

import bcrypt

from steno.domain.service.crypto import PasswordHasher


class BcryptPasswordHasher(PasswordHasher):
    """bcrypt hashing run in a worker thread so the event loop never blocks."""

    def __init__(self, rounds: int = 12) -> None:
        """Initialize hasher.

        Args:
            rounds: bcrypt cost factor (2^rounds iterations)
        """
        self.rounds = rounds

    def _hash(self, secret: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(secret.encode("utf-8"), salt).decode("utf-8")

    @staticmethod
    def _verify(secret: str, hashed: str) -> bool:
        try:
            return bcrypt.checkpw(secret.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError:
            # Malformed stored hash
            return False

    async def hash(self, secret: str) -> str:
        return await asyncio.to_thread(self._hash, secret)

    async def verify(self, secret: str, hashed: str) -> bool:
        return await asyncio.to_thread(self._verify, secret, hashed)
