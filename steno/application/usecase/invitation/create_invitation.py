"""Create invitation use case."""

from datetime import datetime

import logfire
from pydantic import BaseModel

from steno.application.usecase.base import BaseUseCase
from steno.domain.service import InvitationService
from steno.domain.value import (
    ErrorCode,
    InvitationStatus,
    LetterId,
    OrganizationId,
    UserId,
)


class CreateInvitationRequest(BaseModel):
    """Request to create an invitation for a letter."""

    letter_id: LetterId
    organization_id: OrganizationId
    created_by: UserId
    expiration_days: int | None = None
    usage_limit: int | None = None


class CreateInvitationResponse(BaseModel):
    """Response after creating an invitation."""

    success: bool
    invitation_url: str | None = None
    token: str | None = None
    expires_at: datetime | None = None
    usage_limit: int | None = None
    status: InvitationStatus | None = None
    error_code: ErrorCode | None = None
    error_message: str | None = None


class CreateInvitationUseCase(
    BaseUseCase[CreateInvitationRequest, CreateInvitationResponse]
):
    """Use case for issuing a debtor invitation link."""

    def __init__(self, invitation_service: InvitationService) -> None:
        """Initialize use case.

        Args:
            invitation_service: Invitation domain service
        """
        self.invitation_service = invitation_service

    async def execute(self, request: CreateInvitationRequest) -> CreateInvitationResponse:
        """Create an invitation.

        Args:
            request: Letter, acting organization and options

        Returns:
            The invitation URL and token, or a typed failure
        """
        with logfire.span(
            "create_invitation.execute",
            letter_id=str(request.letter_id),
            created_by=str(request.created_by),
        ):
            result = await self.invitation_service.create_invitation(
                request.letter_id,
                request.organization_id,
                expiration_days=request.expiration_days,
                usage_limit=request.usage_limit,
            )
            return CreateInvitationResponse(**result.model_dump())
