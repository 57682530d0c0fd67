"""PostgreSQL implementation of Case repository."""

from datetime import datetime
from typing import Optional

from sqlalchemy import case as sql_case
from sqlalchemy import insert, null, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from steno.domain.model import Case
from steno.domain.repository import CaseRepository
from steno.domain.value import CaseId
from steno.persistence.mappers import case_to_dict, row_to_case
from steno.persistence.tables import cases_table


class PostgresCaseRepository(CaseRepository):
    """PostgreSQL implementation of CaseRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, case_id: CaseId) -> Optional[Case]:
        stmt = select(cases_table).where(cases_table.c.id == case_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_case(dict(row)) if row else None

    async def save(self, case: Case) -> Case:
        case_dict = case_to_dict(case)
        existing = await self.find_by_id(case.id)

        if existing:
            stmt = (
                update(cases_table)
                .where(cases_table.c.id == case.id)
                .values(**case_dict)
            )
        else:
            stmt = insert(cases_table).values(**case_dict)
        await self.session.execute(stmt)
        await self.session.flush()
        return case

    async def record_failed_verification(
        self,
        case_id: CaseId,
        max_attempts: int,
        lock_until: datetime,
        now: datetime,
    ) -> Optional[Case]:
        """Increment attempts and maybe lock, in one conditional UPDATE.

        The row lock taken by the UPDATE serializes concurrent attempts; the
        WHERE clause is re-evaluated after a competing attempt commits, so a
        case locked meanwhile is not touched again.
        """
        attempts = cases_table.c.verification_attempts + 1
        locked_until = cases_table.c.verification_locked_until
        stmt = (
            update(cases_table)
            .where(
                cases_table.c.id == case_id,
                or_(locked_until.is_(None), locked_until <= now),
            )
            .values(
                verification_attempts=attempts,
                verification_locked_until=sql_case(
                    (attempts >= max_attempts, lock_until), else_=null()
                ),
            )
            .returning(*cases_table.c)
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        await self.session.flush()
        return row_to_case(dict(row)) if row else None

    async def reset_verification(self, case_id: CaseId) -> None:
        stmt = (
            update(cases_table)
            .where(cases_table.c.id == case_id)
            .values(verification_attempts=0, verification_locked_until=None)
        )
        await self.session.execute(stmt)
        await self.session.flush()
