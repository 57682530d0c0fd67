"""Account provisioning repository interface."""

from abc import ABC, abstractmethod

from steno.domain.model.debtor_profile import DebtorProfile
from steno.domain.model.session import Session
from steno.domain.model.user import User

# Constraint names reported in ConflictError
USER_EMAIL_CONSTRAINT = "uq_users_email"
PROFILE_CASE_CONSTRAINT = "uq_debtor_profiles_case_id"


class AccountRepository(ABC):
    """Atomic creation of a debtor's account records."""

    @abstractmethod
    async def create_debtor_account(
        self, user: User, profile: DebtorProfile, session: Session
    ) -> None:
        """Create user, profile, case link and session in one transaction.

        All four writes are committed together or not at all. The store's
        uniqueness constraints (one user per email, one profile per case)
        are the final authority under concurrent registrations.

        Args:
            user: The new debtor user
            profile: Profile linking the user to the case
            session: Initial login session

        Raises:
            ConflictError: If a uniqueness constraint rejected the write.
                ``constraint`` is ``USER_EMAIL_CONSTRAINT`` or
                ``PROFILE_CASE_CONSTRAINT``.
        """
        pass
