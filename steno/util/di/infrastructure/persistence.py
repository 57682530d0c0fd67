"""Persistence infrastructure providers."""

from collections.abc import AsyncIterator

import logfire
from dishka import Scope, provide
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from steno.config import Settings
from steno.domain.repository import (
    AccountRepository,
    CaseRepository,
    DebtorProfileRepository,
    DemandLetterRepository,
    UserRepository,
    VerificationGrantRepository,
)
from steno.persistence.database import create_engine, create_session_factory
from steno.persistence.repository import (
    PostgresAccountRepository,
    PostgresCaseRepository,
    PostgresDebtorProfileRepository,
    PostgresDemandLetterRepository,
    PostgresUserRepository,
    PostgresVerificationGrantRepository,
)
from steno.util.di.base import ProviderBase
from steno.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """Persistence component base."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """Production persistence provider using PostgreSQL."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_engine(self, settings: Settings) -> AsyncEngine:
        """Provide database engine."""
        engine = create_engine(settings)
        # Instrument SQLAlchemy for observability
        instrument_sqlalchemy(engine)
        return engine

    @provide(scope=Scope.APP)
    def get_session_factory(
        self, engine: AsyncEngine
    ) -> async_sessionmaker[AsyncSession]:
        """Provide session factory."""
        return create_session_factory(engine)

    @provide(scope=Scope.REQUEST)
    async def get_session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterator[AsyncSession]:
        """Provide database session for request scope.

        The session is automatically committed at the end of the request
        if no exception occurred, or rolled back if an exception was raised.
        """
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception as e:
                logfire.warn("Session rollback", error=str(e))
                await session.rollback()
                raise

    @provide(scope=Scope.REQUEST)
    def get_case_repository(self, session: AsyncSession) -> CaseRepository:
        """Provide Case repository."""
        return PostgresCaseRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_letter_repository(self, session: AsyncSession) -> DemandLetterRepository:
        """Provide DemandLetter repository."""
        return PostgresDemandLetterRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_user_repository(self, session: AsyncSession) -> UserRepository:
        """Provide User repository."""
        return PostgresUserRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_debtor_profile_repository(
        self, session: AsyncSession
    ) -> DebtorProfileRepository:
        """Provide DebtorProfile repository."""
        return PostgresDebtorProfileRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_account_repository(self, session: AsyncSession) -> AccountRepository:
        """Provide Account repository."""
        return PostgresAccountRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_verification_grant_repository(
        self, session: AsyncSession
    ) -> VerificationGrantRepository:
        """Provide verification grant ledger."""
        return PostgresVerificationGrantRepository(session)
