"""Unit tests for invitation use cases."""

from uuid import uuid4

import pytest

from steno.application.usecase.invitation import (
    CreateInvitationRequest,
    CreateInvitationUseCase,
    GetInvitationStatusRequest,
    GetInvitationStatusUseCase,
    RevokeInvitationRequest,
    RevokeInvitationUseCase,
    ValidateInvitationRequest,
    ValidateInvitationUseCase,
)
from steno.domain.value import ErrorCode, InvitationStatus, UserId
from tests.conftest import seed_case_and_letter
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestInvitationUseCases:
    """Tests for the staff-facing and public invitation use cases."""

    @pytest.mark.asyncio
    async def test_create_then_validate(self, unit_env):
        # Arrange
        create = await unit_env.get(CreateInvitationUseCase)
        validate = await unit_env.get(ValidateInvitationUseCase)
        _, letter = await seed_case_and_letter(unit_env)

        # Act
        created = await create.execute(
            CreateInvitationRequest(
                letter_id=letter.id,
                organization_id=letter.organization_id,
                created_by=UserId(uuid4()),
                expiration_days=14,
                usage_limit=2,
            )
        )
        validated = await validate.execute(ValidateInvitationRequest(token=created.token))

        # Assert
        assert created.success
        assert validated.valid
        assert validated.remaining_uses == 2
        assert "case_id" not in validated.model_dump()

    @pytest.mark.asyncio
    async def test_revoke_then_status(self, unit_env):
        create = await unit_env.get(CreateInvitationUseCase)
        revoke = await unit_env.get(RevokeInvitationUseCase)
        get_status = await unit_env.get(GetInvitationStatusUseCase)
        _, letter = await seed_case_and_letter(unit_env)
        await create.execute(
            CreateInvitationRequest(
                letter_id=letter.id,
                organization_id=letter.organization_id,
                created_by=UserId(uuid4()),
            )
        )

        revoked = await revoke.execute(
            RevokeInvitationRequest(
                letter_id=letter.id,
                organization_id=letter.organization_id,
                revoked_by=UserId(uuid4()),
            )
        )
        status = await get_status.execute(
            GetInvitationStatusRequest(
                letter_id=letter.id, organization_id=letter.organization_id
            )
        )

        assert revoked.success
        assert status.status == InvitationStatus.REVOKED
        assert status.revoked_at == revoked.revoked_at

    @pytest.mark.asyncio
    async def test_validate_malformed(self, unit_env):
        validate = await unit_env.get(ValidateInvitationUseCase)

        response = await validate.execute(ValidateInvitationRequest(token="x"))

        assert not response.valid
        assert response.error_code == ErrorCode.MALFORMED
