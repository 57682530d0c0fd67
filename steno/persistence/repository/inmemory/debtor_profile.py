"""In-memory debtor profile repository for testing."""

from typing import Optional

from steno.domain.model import DebtorProfile
from steno.domain.repository import DebtorProfileRepository
from steno.domain.value import CaseId

from .store import InMemoryStore


class InMemoryDebtorProfileRepository(DebtorProfileRepository):
    """In-memory implementation of DebtorProfileRepository for testing."""

    def __init__(self, store: InMemoryStore | None = None) -> None:
        self._store = store or InMemoryStore()

    async def find_by_case(self, case_id: CaseId) -> Optional[DebtorProfile]:
        return self._store.profiles.get(case_id)
