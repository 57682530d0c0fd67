"""In-memory demand letter repository for testing."""

from datetime import datetime
from typing import Optional

from steno.domain.model import DemandLetter, Invitation
from steno.domain.repository import DemandLetterRepository
from steno.domain.value import LetterId, OrganizationId, TokenId

from .store import InMemoryStore


class InMemoryDemandLetterRepository(DemandLetterRepository):
    """In-memory implementation of DemandLetterRepository for testing."""

    def __init__(self, store: InMemoryStore | None = None) -> None:
        self._store = store or InMemoryStore()

    def _by_token_id(self, token_id: TokenId) -> Optional[DemandLetter]:
        for letter in self._store.letters.values():
            if letter.invitation and letter.invitation.token_id == token_id:
                return letter
        return None

    async def find_by_id(
        self, letter_id: LetterId, organization_id: OrganizationId
    ) -> Optional[DemandLetter]:
        letter = self._store.letters.get(letter_id)
        if letter is None or letter.organization_id != organization_id:
            return None
        return letter

    async def find_by_token_id(self, token_id: TokenId) -> Optional[DemandLetter]:
        return self._by_token_id(token_id)

    async def save(self, letter: DemandLetter) -> DemandLetter:
        self._store.letters[letter.id] = letter
        return letter

    async def save_invitation(
        self, letter_id: LetterId, invitation: Invitation
    ) -> None:
        letter = self._store.letters.get(letter_id)
        if letter is None:
            return
        self._store.letters[letter_id] = letter.model_copy(
            update={"invitation": invitation}
        )

    async def increment_usage(
        self, token_id: TokenId, now: datetime
    ) -> Optional[DemandLetter]:
        letter = self._by_token_id(token_id)
        if letter is None or letter.invitation is None:
            return None

        invitation = letter.invitation
        if (
            invitation.revoked_at is not None
            or invitation.is_expired(now)
            or invitation.is_exhausted()
        ):
            return None

        updated = letter.model_copy(
            update={
                "invitation": invitation.model_copy(
                    update={"usage_count": invitation.usage_count + 1}
                )
            }
        )
        self._store.letters[letter.id] = updated
        return updated

    async def revoke(self, letter_id: LetterId, revoked_at: datetime) -> bool:
        letter = self._store.letters.get(letter_id)
        if letter is None or letter.invitation is None:
            return False
        if letter.invitation.revoked_at is not None:
            return False

        self._store.letters[letter_id] = letter.model_copy(
            update={
                "invitation": letter.invitation.model_copy(
                    update={"revoked_at": revoked_at}
                )
            }
        )
        return True
