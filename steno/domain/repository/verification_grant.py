"""Verification grant ledger interface."""

from abc import ABC, abstractmethod
from datetime import datetime


class VerificationGrantRepository(ABC):
    """Tracks which verification grants have been spent."""

    @abstractmethod
    async def consume(self, jti: str, expires_at: datetime) -> bool:
        """Mark a grant as used (insert-if-absent).

        Args:
            jti: Unique grant identifier
            expires_at: Grant expiry, kept so spent entries can be purged

        Returns:
            True on first use, False if the grant was already consumed
        """
        pass
