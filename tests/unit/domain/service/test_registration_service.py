"""Unit tests for RegistrationService."""

import asyncio
import hashlib

import pytest

from steno.domain.repository import (
    CaseRepository,
    DebtorProfileRepository,
    UserRepository,
)
from steno.domain.service import (
    InvitationService,
    JWTService,
    PasswordHasher,
    RegistrationService,
    VerificationService,
)
from steno.domain.value import (
    Email,
    ErrorCode,
    IdentityFragments,
    RequestContext,
    UserRole,
)
from steno.persistence.repository.inmemory import InMemoryStore
from tests.conftest import (
    DEBTOR_DOB,
    DEBTOR_SSN_LAST_FOUR,
    STRONG_PASSWORD,
    seed_case_and_letter,
)
from tests.harness import create_env_fixture

unit_env = create_env_fixture()

CORRECT = IdentityFragments(last_four_ssn=DEBTOR_SSN_LAST_FOUR, date_of_birth=DEBTOR_DOB)


async def _verified(env, usage_limit: int = 1):
    """Seed a case, invite the debtor and verify them."""
    invitation_service = await env.get(InvitationService)
    verification_service = await env.get(VerificationService)
    case, letter = await seed_case_and_letter(env)
    created = await invitation_service.create_invitation(
        letter.id, letter.organization_id, usage_limit=usage_limit
    )
    outcome = await verification_service.verify_identity(created.token, CORRECT)
    assert outcome.verified
    return case, letter, created.token, outcome.verification_token


async def _register(env, token, grant, email="jane@example.com", terms=True):
    service = await env.get(RegistrationService)
    return await service.register_debtor(
        token,
        grant,
        Email(email),
        STRONG_PASSWORD,
        terms,
        RequestContext(ip_address="198.51.100.4", user_agent="pytest"),
    )


class TestRegisterDebtor:
    """Tests for successful registration."""

    @pytest.mark.asyncio
    async def test_register_creates_account(self, unit_env):
        """Registration creates user, profile and session, then signs in."""
        # Arrange
        case, _, token, grant = await _verified(unit_env)

        # Act
        result = await _register(unit_env, token, grant, email="Jane@Example.COM")

        # Assert
        assert result.success
        assert result.role == UserRole.DEBTOR
        assert result.email == "jane@example.com"
        assert result.case_id == case.id

        user_repo = await unit_env.get(UserRepository)
        user = await user_repo.find_by_email(Email("jane@example.com"))
        assert user.id == result.user_id
        assert user.email_verified
        assert user.organization_id == case.organization_id
        hasher = await unit_env.get(PasswordHasher)
        assert await hasher.verify(STRONG_PASSWORD, user.password_hash)

        profile_repo = await unit_env.get(DebtorProfileRepository)
        profile = await profile_repo.find_by_case(case.id)
        assert profile.user_id == user.id
        assert profile.terms_version == "1.0"
        assert profile.terms_accepted_ip == "198.51.100.4"

        case_repo = await unit_env.get(CaseRepository)
        assert (await case_repo.find_by_id(case.id)).debtor_user_id == user.id

    @pytest.mark.asyncio
    async def test_session_token_matches_stored_session(self, unit_env):
        # Arrange
        _, _, token, grant = await _verified(unit_env)

        # Act
        result = await _register(unit_env, token, grant)

        # Assert
        jwt_service = await unit_env.get(JWTService)
        payload = jwt_service.verify_session_token(result.session_token)
        assert payload.sub == str(result.user_id)
        assert payload.role == "DEBTOR"

        store = await unit_env.get(InMemoryStore)
        (session,) = store.sessions.values()
        assert str(session.id) == payload.session_id
        assert session.token_hash == hashlib.sha256(
            session.id.hex.encode("ascii")
        ).hexdigest()
        assert session.user_agent == "pytest"

    @pytest.mark.asyncio
    async def test_registration_redeems_invitation(self, unit_env):
        _, letter, token, grant = await _verified(unit_env)

        await _register(unit_env, token, grant)

        invitation_service = await unit_env.get(InvitationService)
        status = await invitation_service.get_invitation_status(
            letter.id, letter.organization_id
        )
        assert status.usage_count == 1


class TestRegistrationFailures:
    """Tests for rejected registrations."""

    @pytest.mark.asyncio
    async def test_terms_must_be_accepted(self, unit_env):
        _, _, token, grant = await _verified(unit_env)

        result = await _register(unit_env, token, grant, terms=False)

        assert result.error_code == ErrorCode.TERMS_NOT_ACCEPTED

    @pytest.mark.asyncio
    async def test_grant_is_single_use(self, unit_env):
        """Replaying a spent grant is refused."""
        # Arrange
        _, _, token, grant = await _verified(unit_env, usage_limit=0)
        await _register(unit_env, token, grant)

        # Act
        result = await _register(unit_env, token, grant, email="other@example.com")

        # Assert
        assert result.error_code == ErrorCode.INVALID_VERIFICATION_TOKEN

    @pytest.mark.asyncio
    async def test_garbage_grant_is_rejected(self, unit_env):
        _, _, token, _ = await _verified(unit_env)

        result = await _register(unit_env, token, "not-a-grant")

        assert result.error_code == ErrorCode.INVALID_VERIFICATION_TOKEN

    @pytest.mark.asyncio
    async def test_grant_for_other_case_is_rejected(self, unit_env):
        """A grant only authorizes registration on the invitation it came from."""
        # Arrange
        _, _, token, _ = await _verified(unit_env)
        _, _, _, other_grant = await _verified(unit_env)

        # Act
        result = await _register(unit_env, token, other_grant)

        # Assert
        assert result.error_code == ErrorCode.INVALID_VERIFICATION_TOKEN

    @pytest.mark.asyncio
    async def test_session_token_is_not_a_grant(self, unit_env):
        _, _, token, grant = await _verified(unit_env, usage_limit=0)
        registered = await _register(unit_env, token, grant)

        result = await _register(
            unit_env, token, registered.session_token, email="x@example.com"
        )

        assert result.error_code == ErrorCode.INVALID_VERIFICATION_TOKEN

    @pytest.mark.asyncio
    async def test_existing_email_is_rejected(self, unit_env):
        _, _, first_token, first_grant = await _verified(unit_env)
        await _register(unit_env, first_token, first_grant)
        _, _, token, grant = await _verified(unit_env)

        result = await _register(unit_env, token, grant)

        assert result.error_code == ErrorCode.EMAIL_EXISTS

    @pytest.mark.asyncio
    async def test_second_account_for_case_is_rejected(self, unit_env):
        """A case gets at most one debtor account, even with uses left."""
        # Arrange
        verification_service = await unit_env.get(VerificationService)
        _, _, token, grant = await _verified(unit_env, usage_limit=0)
        second = await verification_service.verify_identity(token, CORRECT)
        await _register(unit_env, token, grant)

        # Act
        result = await _register(
            unit_env, token, second.verification_token, email="again@example.com"
        )

        # Assert
        assert result.error_code == ErrorCode.ALREADY_REGISTERED

    @pytest.mark.asyncio
    async def test_verification_after_registration_is_refused(self, unit_env):
        verification_service = await unit_env.get(VerificationService)
        _, _, token, grant = await _verified(unit_env, usage_limit=0)
        await _register(unit_env, token, grant)

        result = await verification_service.verify_identity(token, CORRECT)

        assert result.error_code == ErrorCode.ALREADY_REGISTERED

    @pytest.mark.asyncio
    async def test_concurrent_registrations_create_one_account(self, unit_env):
        """Two simultaneous registrations for one case yield one account."""
        # Arrange
        verification_service = await unit_env.get(VerificationService)
        case, _, token, grant = await _verified(unit_env, usage_limit=0)
        second = await verification_service.verify_identity(token, CORRECT)

        # Act
        results = await asyncio.gather(
            _register(unit_env, token, grant, email="first@example.com"),
            _register(
                unit_env, token, second.verification_token, email="second@example.com"
            ),
        )

        # Assert
        assert sum(r.success for r in results) == 1
        (loser,) = [r for r in results if not r.success]
        assert loser.error_code == ErrorCode.ALREADY_REGISTERED

        store = await unit_env.get(InMemoryStore)
        assert len(store.users) == 1
        assert len(store.profiles) == 1
        assert case.id in store.profiles

    @pytest.mark.asyncio
    async def test_exhausted_invitation_cannot_register(self, unit_env):
        invitation_service = await unit_env.get(InvitationService)
        _, _, token, grant = await _verified(unit_env)
        await invitation_service.redeem_invitation(token)

        result = await _register(unit_env, token, grant)

        assert result.error_code == ErrorCode.EXHAUSTED
