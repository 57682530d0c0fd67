"""Demand letter repository interface (invitation storage)."""

from abc import ABC, abstractmethod
from datetime import datetime

from steno.domain.model.invitation import Invitation
from steno.domain.model.letter import DemandLetter
from steno.domain.value import LetterId, OrganizationId, TokenId


class DemandLetterRepository(ABC):
    """Repository for demand letters and their embedded invitation."""

    @abstractmethod
    async def find_by_id(
        self, letter_id: LetterId, organization_id: OrganizationId
    ) -> DemandLetter | None:
        """Find a letter belonging to an organization.

        Args:
            letter_id: The letter's unique identifier
            organization_id: Organization the caller acts for

        Returns:
            The letter if found within that organization, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_token_id(self, token_id: TokenId) -> DemandLetter | None:
        """Find the letter whose invitation has this token ID.

        Indexed lookup used on every public invitation request.

        Args:
            token_id: Token ID taken from the token envelope

        Returns:
            The letter if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, letter: DemandLetter) -> DemandLetter:
        """Save a letter (create or update).

        Args:
            letter: The letter to save

        Returns:
            The saved letter
        """
        pass

    @abstractmethod
    async def save_invitation(
        self, letter_id: LetterId, invitation: Invitation
    ) -> None:
        """Replace the letter's invitation with a new one.

        Args:
            letter_id: The letter to attach the invitation to
            invitation: The new invitation (zeroed count, no revocation)
        """
        pass

    @abstractmethod
    async def increment_usage(
        self, token_id: TokenId, now: datetime
    ) -> DemandLetter | None:
        """Atomically consume one use of an invitation.

        Single conditional update: applies only while the invitation is not
        revoked, not expired at ``now`` and (unlimited or count < limit).

        Args:
            token_id: Token ID of the invitation
            now: Current time

        Returns:
            The updated letter, or None if no use could be consumed
        """
        pass

    @abstractmethod
    async def revoke(self, letter_id: LetterId, revoked_at: datetime) -> bool:
        """Stamp the invitation as revoked if it is not already.

        Args:
            letter_id: The letter whose invitation to revoke
            revoked_at: Revocation timestamp

        Returns:
            True if this call revoked it, False if it was already revoked
        """
        pass
