"""Get invitation status use case."""

from datetime import datetime

from pydantic import BaseModel

from steno.application.usecase.base import BaseUseCase
from steno.domain.service import InvitationService
from steno.domain.value import ErrorCode, InvitationStatus, LetterId, OrganizationId


class GetInvitationStatusRequest(BaseModel):
    """Get invitation status request."""

    letter_id: LetterId
    organization_id: OrganizationId


class GetInvitationStatusResponse(BaseModel):
    """Staff-side invitation details."""

    found: bool = True
    has_invitation: bool = False
    invitation_url: str | None = None
    token: str | None = None
    expires_at: datetime | None = None
    usage_limit: int | None = None
    usage_count: int | None = None
    status: InvitationStatus | None = None
    revoked_at: datetime | None = None
    created_at: datetime | None = None
    error_code: ErrorCode | None = None
    error_message: str | None = None


class GetInvitationStatusUseCase(
    BaseUseCase[GetInvitationStatusRequest, GetInvitationStatusResponse]
):
    """Use case for the staff dashboard's invitation panel."""

    def __init__(self, invitation_service: InvitationService) -> None:
        self.invitation_service = invitation_service

    async def execute(
        self, request: GetInvitationStatusRequest
    ) -> GetInvitationStatusResponse:
        result = await self.invitation_service.get_invitation_status(
            request.letter_id, request.organization_id
        )
        return GetInvitationStatusResponse(**result.model_dump())
