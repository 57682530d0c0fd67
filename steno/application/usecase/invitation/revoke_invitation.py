"""Revoke invitation use case."""

from datetime import datetime

import logfire
from pydantic import BaseModel

from steno.application.usecase.base import BaseUseCase
from steno.domain.service import InvitationService
from steno.domain.value import ErrorCode, LetterId, OrganizationId, UserId


class RevokeInvitationRequest(BaseModel):
    """Revoke invitation request."""

    letter_id: LetterId
    organization_id: OrganizationId
    revoked_by: UserId


class RevokeInvitationResponse(BaseModel):
    """Revoke invitation response."""

    success: bool
    revoked_at: datetime | None = None
    error_code: ErrorCode | None = None
    error_message: str | None = None


class RevokeInvitationUseCase(
    BaseUseCase[RevokeInvitationRequest, RevokeInvitationResponse]
):
    """Use case for permanently disabling a letter's invitation."""

    def __init__(self, invitation_service: InvitationService) -> None:
        """Initialize use case.

        Args:
            invitation_service: Invitation domain service
        """
        self.invitation_service = invitation_service

    async def execute(self, request: RevokeInvitationRequest) -> RevokeInvitationResponse:
        with logfire.span(
            "revoke_invitation.execute",
            letter_id=str(request.letter_id),
            revoked_by=str(request.revoked_by),
        ):
            result = await self.invitation_service.revoke_invitation(
                request.letter_id, request.organization_id
            )
            return RevokeInvitationResponse(**result.model_dump())
