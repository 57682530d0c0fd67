"""PostgreSQL implementation of DebtorProfile repository."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from steno.domain.model import DebtorProfile
from steno.domain.repository import DebtorProfileRepository
from steno.domain.value import CaseId
from steno.persistence.mappers import row_to_debtor_profile
from steno.persistence.tables import debtor_profiles_table


class PostgresDebtorProfileRepository(DebtorProfileRepository):
    """PostgreSQL implementation of DebtorProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_by_case(self, case_id: CaseId) -> Optional[DebtorProfile]:
        stmt = select(debtor_profiles_table).where(
            debtor_profiles_table.c.case_id == case_id
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_debtor_profile(dict(row)) if row else None
