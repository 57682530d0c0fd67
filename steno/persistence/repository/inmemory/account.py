"""In-memory account repository for testing."""

from steno.domain.error import ConflictError
from steno.domain.model import DebtorProfile, Session, User
from steno.domain.repository import AccountRepository
from steno.domain.repository.account import (
    PROFILE_CASE_CONSTRAINT,
    USER_EMAIL_CONSTRAINT,
)

from .store import InMemoryStore


class InMemoryAccountRepository(AccountRepository):
    """Checks both uniqueness constraints, then applies all four writes."""

    def __init__(self, store: InMemoryStore | None = None) -> None:
        self._store = store or InMemoryStore()

    async def create_debtor_account(
        self, user: User, profile: DebtorProfile, session: Session
    ) -> None:
        if any(existing.email == user.email for existing in self._store.users.values()):
            raise ConflictError(USER_EMAIL_CONSTRAINT)
        if profile.case_id in self._store.profiles:
            raise ConflictError(PROFILE_CASE_CONSTRAINT)

        self._store.users[user.id] = user
        self._store.profiles[profile.case_id] = profile
        case = self._store.cases.get(profile.case_id)
        if case is not None:
            self._store.cases[case.id] = case.model_copy(
                update={"debtor_user_id": user.id}
            )
        self._store.sessions[session.id] = session
