"""In-memory case repository for testing."""

from datetime import datetime
from typing import Optional

from steno.domain.model import Case
from steno.domain.repository import CaseRepository
from steno.domain.value import CaseId

from .store import InMemoryStore


class InMemoryCaseRepository(CaseRepository):
    """In-memory implementation of CaseRepository for testing."""

    def __init__(self, store: InMemoryStore | None = None) -> None:
        self._store = store or InMemoryStore()

    async def find_by_id(self, case_id: CaseId) -> Optional[Case]:
        return self._store.cases.get(case_id)

    async def save(self, case: Case) -> Case:
        self._store.cases[case.id] = case
        return case

    async def record_failed_verification(
        self,
        case_id: CaseId,
        max_attempts: int,
        lock_until: datetime,
        now: datetime,
    ) -> Optional[Case]:
        case = self._store.cases.get(case_id)
        if case is None or case.is_locked(now):
            return None

        attempts = case.verification_attempts + 1
        updated = case.model_copy(
            update={
                "verification_attempts": attempts,
                "verification_locked_until": (
                    lock_until if attempts >= max_attempts else None
                ),
            }
        )
        self._store.cases[case_id] = updated
        return updated

    async def reset_verification(self, case_id: CaseId) -> None:
        case = self._store.cases.get(case_id)
        if case is None:
            return
        self._store.cases[case_id] = case.model_copy(
            update={"verification_attempts": 0, "verification_locked_until": None}
        )
