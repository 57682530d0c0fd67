"""In-memory verification grant ledger for testing."""

from datetime import datetime

from steno.domain.repository import VerificationGrantRepository

from .store import InMemoryStore


class InMemoryVerificationGrantRepository(VerificationGrantRepository):
    """In-memory implementation of VerificationGrantRepository for testing."""

    def __init__(self, store: InMemoryStore | None = None) -> None:
        self._store = store or InMemoryStore()

    async def consume(self, jti: str, expires_at: datetime) -> bool:
        if jti in self._store.consumed_grants:
            return False
        self._store.consumed_grants[jti] = expires_at
        return True
