"""Case repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime

from steno.domain.model.case import Case
from steno.domain.value import CaseId


class CaseRepository(ABC):
    """Repository for the Case aggregate.

    Verification counters are only ever changed through the atomic
    operations below, never by saving a modified copy of a case read earlier.
    """

    @abstractmethod
    async def find_by_id(self, case_id: CaseId) -> Case | None:
        """Find a case by ID.

        Args:
            case_id: The case's unique identifier

        Returns:
            The case if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, case: Case) -> Case:
        """Save a case (create or update).

        Args:
            case: The case to save

        Returns:
            The saved case
        """
        pass

    @abstractmethod
    async def record_failed_verification(
        self,
        case_id: CaseId,
        max_attempts: int,
        lock_until: datetime,
        now: datetime,
    ) -> Case | None:
        """Atomically count one failed verification attempt.

        Increments ``verification_attempts``; when the new count reaches
        ``max_attempts`` sets ``verification_locked_until`` to ``lock_until``.
        The update only applies if the case is not locked at ``now``, so
        concurrent attempts can never push past the threshold unnoticed.

        Args:
            case_id: The case being verified
            max_attempts: Lockout threshold
            lock_until: Lockout expiry to apply when the threshold is reached
            now: Current time

        Returns:
            The updated case, or None if the case is missing or already locked
        """
        pass

    @abstractmethod
    async def reset_verification(self, case_id: CaseId) -> None:
        """Zero the attempt counter and clear any lockout.

        Args:
            case_id: The case that was successfully verified
        """
        pass
