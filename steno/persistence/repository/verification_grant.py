"""PostgreSQL implementation of the verification grant ledger."""

from datetime import datetime

from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from steno.domain.repository import VerificationGrantRepository
from steno.persistence.tables import consumed_verification_grants_table

grants = consumed_verification_grants_table


class PostgresVerificationGrantRepository(VerificationGrantRepository):
    """Spent grants, keyed by ``jti``."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def consume(self, jti: str, expires_at: datetime) -> bool:
        stmt = (
            insert(grants)
            .values(jti=jti, expires_at=expires_at)
            .on_conflict_do_nothing(index_elements=[grants.c.jti])
            .returning(grants.c.jti)
        )
        result = await self.session.execute(stmt)
        consumed = result.first() is not None
        await self.session.flush()
        return consumed
