"""Integration tests for the PostgreSQL repositories.

Assumes postgres is running and migrated (`just local-up`).

Tests that race several writers commit their fixtures first and give every
writer its own session, so each one runs in a separate transaction.
"""

import asyncio
import hashlib
import secrets
from collections.abc import Awaitable, Callable
from datetime import date, datetime, timedelta, timezone
from typing import TypeVar
from uuid import uuid4

import pytest
from sqlalchemy import func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from steno.domain.error import ConflictError
from steno.domain.model import (
    Case,
    DebtorProfile,
    DemandLetter,
    Invitation,
    Session,
    User,
)
from steno.domain.repository import (
    CaseRepository,
    DemandLetterRepository,
    VerificationGrantRepository,
)
from steno.domain.repository.account import (
    PROFILE_CASE_CONSTRAINT,
    USER_EMAIL_CONSTRAINT,
)
from steno.domain.value import (
    CaseId,
    DebtorProfileId,
    Email,
    InvitationToken,
    LetterId,
    OrganizationId,
    SessionId,
    TokenId,
    UserId,
    UserRole,
)
from steno.persistence.repository import (
    PostgresAccountRepository,
    PostgresCaseRepository,
    PostgresDemandLetterRepository,
)
from steno.persistence.tables import (
    cases_table,
    debtor_profiles_table,
    organizations_table,
    sessions_table,
    users_table,
)
from tests.harness import create_env_fixture

integration_env = create_env_fixture(unmock={"persistence"})

T = TypeVar("T")


async def _seed(env) -> tuple[Case, DemandLetter]:
    session = await env.get(AsyncSession)
    organization_id = OrganizationId(uuid4())
    await session.execute(
        insert(organizations_table).values(id=organization_id, name="Test Firm")
    )

    case_repo = await env.get(CaseRepository)
    letter_repo = await env.get(DemandLetterRepository)
    case = await case_repo.save(
        Case(
            id=CaseId(uuid4()),
            organization_id=organization_id,
            creditor_name="Acme Lending",
            debtor_name="Jane Doe",
            debtor_dob=date(1985, 3, 15),
        )
    )
    letter = await letter_repo.save(
        DemandLetter(
            id=LetterId(uuid4()), case_id=case.id, organization_id=organization_id
        )
    )
    return case, letter


async def _seed_committed(env) -> tuple[Case, DemandLetter]:
    """Seed and commit, so other sessions can see the rows."""
    case, letter = await _seed(env)
    await (await env.get(AsyncSession)).commit()
    return case, letter


async def _in_own_session(env, work: Callable[[AsyncSession], Awaitable[T]]) -> T:
    """Run ``work`` in a fresh session and commit whatever it wrote."""
    factory = await env.get(async_sessionmaker[AsyncSession])
    async with factory() as session:
        result = await work(session)
        await session.commit()
        return result


def _invitation(usage_limit: int) -> Invitation:
    now = datetime.now(timezone.utc)
    token_id = TokenId(uuid4().hex)
    return Invitation(
        token=InvitationToken(f"token-{token_id}"),
        token_id=token_id,
        encrypted_payload="{}",
        expires_at=now + timedelta(days=1),
        usage_limit=usage_limit,
        created_at=now,
    )


def _account(
    case: Case, email: str | None = None
) -> tuple[User, DebtorProfile, Session]:
    now = datetime.now(timezone.utc)
    user = User(
        id=UserId(uuid4()),
        organization_id=case.organization_id,
        email=Email(email or f"{uuid4().hex[:12]}@example.com"),
        password_hash="$2b$04$notarealhashnotarealhashnotarealhashnotarealhashnot",
        role=UserRole.DEBTOR,
        email_verified=True,
        created_at=now,
    )
    profile = DebtorProfile(
        id=DebtorProfileId(uuid4()),
        user_id=user.id,
        case_id=case.id,
        invitation_token_id=TokenId(uuid4().hex),
        terms_accepted_at=now,
        terms_version="1.0",
        created_at=now,
    )
    session_id = SessionId(uuid4())
    session = Session(
        id=session_id,
        user_id=user.id,
        token_hash=hashlib.sha256(session_id.hex.encode("ascii")).hexdigest(),
        csrf_token=secrets.token_hex(32),
        expires_at=now + timedelta(hours=24),
        created_at=now,
    )
    return user, profile, session


class TestDemandLetterRepositoryIntegration:
    """Integration tests for PostgresDemandLetterRepository."""

    @pytest.mark.asyncio
    async def test_invitation_roundtrip(self, integration_env):
        # Arrange
        letter_repo = await integration_env.get(DemandLetterRepository)
        _, letter = await _seed(integration_env)
        invitation = _invitation(usage_limit=2)

        # Act
        await letter_repo.save_invitation(letter.id, invitation)
        found = await letter_repo.find_by_token_id(invitation.token_id)

        # Assert
        assert found.id == letter.id
        assert found.invitation.token == invitation.token
        assert found.invitation.usage_limit == 2
        assert found.invitation.usage_count == 0

    @pytest.mark.asyncio
    async def test_increment_usage_stops_at_limit(self, integration_env):
        letter_repo = await integration_env.get(DemandLetterRepository)
        _, letter = await _seed(integration_env)
        invitation = _invitation(usage_limit=1)
        await letter_repo.save_invitation(letter.id, invitation)
        now = datetime.now(timezone.utc)

        first = await letter_repo.increment_usage(invitation.token_id, now)
        second = await letter_repo.increment_usage(invitation.token_id, now)

        assert first.invitation.usage_count == 1
        assert second is None

    @pytest.mark.asyncio
    async def test_concurrent_increments_admit_exactly_one(self, integration_env):
        # Arrange
        letter_repo = await integration_env.get(DemandLetterRepository)
        _, letter = await _seed(integration_env)
        invitation = _invitation(usage_limit=1)
        await letter_repo.save_invitation(letter.id, invitation)
        await (await integration_env.get(AsyncSession)).commit()
        now = datetime.now(timezone.utc)

        async def increment(session: AsyncSession):
            repo = PostgresDemandLetterRepository(session)
            return await repo.increment_usage(invitation.token_id, now)

        # Act
        results = await asyncio.gather(
            *(_in_own_session(integration_env, increment) for _ in range(8))
        )

        # Assert
        assert sum(1 for r in results if r is not None) == 1
        stored = await _in_own_session(
            integration_env,
            lambda s: PostgresDemandLetterRepository(s).find_by_token_id(
                invitation.token_id
            ),
        )
        assert stored.invitation.usage_count == 1

    @pytest.mark.asyncio
    async def test_revoke_only_once(self, integration_env):
        letter_repo = await integration_env.get(DemandLetterRepository)
        _, letter = await _seed(integration_env)
        await letter_repo.save_invitation(letter.id, _invitation(usage_limit=1))
        now = datetime.now(timezone.utc)

        assert await letter_repo.revoke(letter.id, now)
        assert not await letter_repo.revoke(letter.id, now)


class TestCaseRepositoryIntegration:
    """Integration tests for PostgresCaseRepository lockout counters."""

    @pytest.mark.asyncio
    async def test_failed_verifications_lock_at_threshold(self, integration_env):
        # Arrange
        case_repo = await integration_env.get(CaseRepository)
        case, _ = await _seed(integration_env)
        now = datetime.now(timezone.utc)
        lock_until = now + timedelta(minutes=30)

        # Act
        results = [
            await case_repo.record_failed_verification(case.id, 3, lock_until, now)
            for _ in range(4)
        ]

        # Assert
        assert [r.verification_attempts for r in results[:3]] == [1, 2, 3]
        assert results[1].verification_locked_until is None
        assert results[2].verification_locked_until == lock_until
        assert results[3] is None

    @pytest.mark.asyncio
    async def test_concurrent_failures_never_overshoot_lock(self, integration_env):
        # Arrange
        case, _ = await _seed_committed(integration_env)
        now = datetime.now(timezone.utc)
        lock_until = now + timedelta(minutes=30)

        async def fail(session: AsyncSession):
            repo = PostgresCaseRepository(session)
            return await repo.record_failed_verification(case.id, 3, lock_until, now)

        # Act
        results = await asyncio.gather(
            *(_in_own_session(integration_env, fail) for _ in range(6))
        )

        # Assert
        recorded = [r for r in results if r is not None]
        assert sorted(r.verification_attempts for r in recorded) == [1, 2, 3]
        stored = await _in_own_session(
            integration_env, lambda s: PostgresCaseRepository(s).find_by_id(case.id)
        )
        assert stored.verification_attempts == 3
        assert stored.verification_locked_until == lock_until

    @pytest.mark.asyncio
    async def test_reset_clears_lock(self, integration_env):
        case_repo = await integration_env.get(CaseRepository)
        case, _ = await _seed(integration_env)
        now = datetime.now(timezone.utc)
        for _ in range(3):
            await case_repo.record_failed_verification(
                case.id, 3, now + timedelta(minutes=30), now
            )

        await case_repo.reset_verification(case.id)

        stored = await case_repo.find_by_id(case.id)
        assert stored.verification_attempts == 0
        assert stored.verification_locked_until is None


class TestAccountRepositoryIntegration:
    """Integration tests for PostgresAccountRepository."""

    @pytest.mark.asyncio
    async def test_creates_all_records_and_links_case(self, integration_env):
        # Arrange
        case, _ = await _seed_committed(integration_env)
        user, profile, session = _account(case)

        # Act
        await _in_own_session(
            integration_env,
            lambda s: PostgresAccountRepository(s).create_debtor_account(
                user, profile, session
            ),
        )

        # Assert
        stored = await _in_own_session(
            integration_env, lambda s: PostgresCaseRepository(s).find_by_id(case.id)
        )
        assert stored.debtor_user_id == user.id

    @pytest.mark.asyncio
    async def test_second_account_for_case_leaves_no_writes(self, integration_env):
        # Arrange
        case, _ = await _seed_committed(integration_env)
        first = _account(case)
        second = _account(case)
        await _in_own_session(
            integration_env,
            lambda s: PostgresAccountRepository(s).create_debtor_account(*first),
        )

        # Act
        with pytest.raises(ConflictError) as exc_info:
            await _in_own_session(
                integration_env,
                lambda s: PostgresAccountRepository(s).create_debtor_account(*second),
            )

        # Assert
        assert exc_info.value.constraint == PROFILE_CASE_CONSTRAINT
        user, _, session = second

        async def leftovers(s: AsyncSession):
            users = await s.scalar(
                select(func.count()).where(users_table.c.id == user.id)
            )
            sessions = await s.scalar(
                select(func.count()).where(sessions_table.c.id == session.id)
            )
            profiles = await s.scalar(
                select(func.count()).where(debtor_profiles_table.c.case_id == case.id)
            )
            linked = await s.scalar(
                select(cases_table.c.debtor_user_id).where(cases_table.c.id == case.id)
            )
            return users, sessions, profiles, linked

        users, sessions, profiles, linked = await _in_own_session(
            integration_env, leftovers
        )
        assert (users, sessions, profiles) == (0, 0, 1)
        assert linked == first[0].id

    @pytest.mark.asyncio
    async def test_duplicate_email_names_email_constraint(self, integration_env):
        # Arrange
        email = f"{uuid4().hex[:12]}@example.com"
        case_a, _ = await _seed_committed(integration_env)
        case_b, _ = await _seed_committed(integration_env)
        await _in_own_session(
            integration_env,
            lambda s: PostgresAccountRepository(s).create_debtor_account(
                *_account(case_a, email)
            ),
        )

        # Act
        with pytest.raises(ConflictError) as exc_info:
            await _in_own_session(
                integration_env,
                lambda s: PostgresAccountRepository(s).create_debtor_account(
                    *_account(case_b, email)
                ),
            )

        # Assert
        assert exc_info.value.constraint == USER_EMAIL_CONSTRAINT

    @pytest.mark.asyncio
    async def test_concurrent_registrations_create_one_account(self, integration_env):
        # Arrange
        case, _ = await _seed_committed(integration_env)
        accounts = [_account(case) for _ in range(3)]

        def create(account):
            return lambda s: PostgresAccountRepository(s).create_debtor_account(
                *account
            )

        # Act
        results = await asyncio.gather(
            *(_in_own_session(integration_env, create(a)) for a in accounts),
            return_exceptions=True,
        )

        # Assert
        conflicts = [r for r in results if isinstance(r, ConflictError)]
        assert len(conflicts) == 2
        assert all(c.constraint == PROFILE_CASE_CONSTRAINT for c in conflicts)
        assert sum(1 for r in results if r is None) == 1


class TestVerificationGrantRepositoryIntegration:
    """Integration tests for the grant ledger."""

    @pytest.mark.asyncio
    async def test_grant_consumed_once(self, integration_env):
        grants = await integration_env.get(VerificationGrantRepository)
        jti = uuid4().hex
        expires_at = datetime.now(timezone.utc) + timedelta(minutes=15)

        first = await grants.consume(jti, expires_at)
        again = await grants.consume(jti, expires_at)

        assert first is True
        assert again is False
