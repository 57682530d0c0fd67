"""PostgreSQL implementation of DemandLetter repository."""

from datetime import datetime
from typing import Optional

from sqlalchemy import insert, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from steno.domain.model import DemandLetter, Invitation
from steno.domain.repository import DemandLetterRepository
from steno.domain.value import LetterId, OrganizationId, TokenId
from steno.persistence.mappers import invitation_to_dict, letter_to_dict, row_to_letter
from steno.persistence.tables import demand_letters_table

letters = demand_letters_table


class PostgresDemandLetterRepository(DemandLetterRepository):
    """PostgreSQL implementation of DemandLetterRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def _find_one(self, *conditions) -> Optional[DemandLetter]:
        stmt = select(letters).where(*conditions)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_letter(dict(row)) if row else None

    async def find_by_id(
        self, letter_id: LetterId, organization_id: OrganizationId
    ) -> Optional[DemandLetter]:
        return await self._find_one(
            letters.c.id == letter_id,
            letters.c.organization_id == organization_id,
        )

    async def find_by_token_id(self, token_id: TokenId) -> Optional[DemandLetter]:
        """Find by token ID (unique index on ``invitation_token_id``)."""
        return await self._find_one(letters.c.invitation_token_id == token_id)

    async def save(self, letter: DemandLetter) -> DemandLetter:
        letter_dict = letter_to_dict(letter)
        existing = await self._find_one(letters.c.id == letter.id)

        if existing:
            stmt = update(letters).where(letters.c.id == letter.id).values(**letter_dict)
        else:
            stmt = insert(letters).values(**letter_dict)
        await self.session.execute(stmt)
        await self.session.flush()
        return letter

    async def save_invitation(
        self, letter_id: LetterId, invitation: Invitation
    ) -> None:
        stmt = (
            update(letters)
            .where(letters.c.id == letter_id)
            .values(**invitation_to_dict(invitation))
        )
        await self.session.execute(stmt)
        await self.session.flush()

    async def increment_usage(
        self, token_id: TokenId, now: datetime
    ) -> Optional[DemandLetter]:
        """Consume one use with a compare-and-increment UPDATE.

        Runs in a savepoint so a failure here never undoes earlier writes of
        the same request.
        """
        stmt = (
            update(letters)
            .where(
                letters.c.invitation_token_id == token_id,
                letters.c.invitation_revoked_at.is_(None),
                letters.c.invitation_expires_at > now,
                or_(
                    letters.c.invitation_usage_limit == 0,
                    letters.c.invitation_usage_count
                    < letters.c.invitation_usage_limit,
                ),
            )
            .values(invitation_usage_count=letters.c.invitation_usage_count + 1)
            .returning(*letters.c)
        )
        async with self.session.begin_nested():
            result = await self.session.execute(stmt)
            row = result.mappings().first()
        return row_to_letter(dict(row)) if row else None

    async def revoke(self, letter_id: LetterId, revoked_at: datetime) -> bool:
        stmt = (
            update(letters)
            .where(
                letters.c.id == letter_id,
                letters.c.invitation_token_id.is_not(None),
                letters.c.invitation_revoked_at.is_(None),
            )
            .values(invitation_revoked_at=revoked_at)
            .returning(letters.c.id)
        )
        result = await self.session.execute(stmt)
        revoked = result.first() is not None
        await self.session.flush()
        return revoked
