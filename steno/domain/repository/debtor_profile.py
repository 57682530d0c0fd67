"""Debtor profile repository interface."""

from abc import ABC, abstractmethod

from steno.domain.model.debtor_profile import DebtorProfile
from steno.domain.value import CaseId


class DebtorProfileRepository(ABC):
    """Read access to debtor profiles.

    Profiles are only written by ``AccountRepository.create_debtor_account``.
    """

    @abstractmethod
    async def find_by_case(self, case_id: CaseId) -> DebtorProfile | None:
        """Find the profile registered for a case.

        Args:
            case_id: The case's unique identifier

        Returns:
            The profile if one exists, None otherwise
        """
        pass
