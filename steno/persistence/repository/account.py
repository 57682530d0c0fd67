"""PostgreSQL implementation of Account repository."""

from sqlalchemy import insert, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from steno.domain.error import ConflictError
from steno.domain.model import DebtorProfile, Session, User
from steno.domain.repository import AccountRepository
from steno.domain.repository.account import (
    PROFILE_CASE_CONSTRAINT,
    USER_EMAIL_CONSTRAINT,
)
from steno.persistence.mappers import (
    debtor_profile_to_dict,
    session_to_dict,
    user_to_dict,
)
from steno.persistence.tables import (
    cases_table,
    debtor_profiles_table,
    sessions_table,
    users_table,
)

KNOWN_CONSTRAINTS = (USER_EMAIL_CONSTRAINT, PROFILE_CASE_CONSTRAINT)


def _violated_constraint(error: IntegrityError) -> str:
    """Name the unique constraint behind an IntegrityError.

    asyncpg exposes ``constraint_name`` on the driver exception; the message
    text is the fallback.
    """
    driver_error = getattr(error.orig, "__cause__", None)
    name = getattr(driver_error, "constraint_name", None)
    if name:
        return name
    message = str(error.orig)
    for constraint in KNOWN_CONSTRAINTS:
        if constraint in message:
            return constraint
    return "unknown"


class PostgresAccountRepository(AccountRepository):
    """Creates debtor accounts in a single committed transaction."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def create_debtor_account(
        self, user: User, profile: DebtorProfile, session: Session
    ) -> None:
        """Insert user, profile, case link and session, then commit.

        The inserts run in a savepoint, so a constraint violation discards all
        four writes. The commit happens here rather than at the end of the
        request: once this returns, the account survives anything that fails
        later in the same request.

        Raises:
            ConflictError: On a unique constraint violation
        """
        try:
            async with self.session.begin_nested():
                await self.session.execute(
                    insert(users_table).values(**user_to_dict(user))
                )
                await self.session.execute(
                    insert(debtor_profiles_table).values(
                        **debtor_profile_to_dict(profile)
                    )
                )
                await self.session.execute(
                    update(cases_table)
                    .where(cases_table.c.id == profile.case_id)
                    .values(debtor_user_id=user.id)
                )
                await self.session.execute(
                    insert(sessions_table).values(**session_to_dict(session))
                )
        except IntegrityError as e:
            raise ConflictError(_violated_constraint(e)) from e

        await self.session.commit()
