"""Validate invitation use case."""

from datetime import datetime

from pydantic import BaseModel

from steno.application.usecase.base import BaseUseCase
from steno.domain.service import InvitationService
from steno.domain.value import ErrorCode, InvitationStatus


class ValidateInvitationRequest(BaseModel):
    """Validate invitation request."""

    token: str


class ValidateInvitationResponse(BaseModel):
    """Public view of an invitation: nothing identifying beyond the masked reference."""

    valid: bool
    status: InvitationStatus | None = None
    case_reference: str | None = None
    expires_at: datetime | None = None
    remaining_uses: int | None = None
    error_code: ErrorCode | None = None
    error_message: str | None = None


class ValidateInvitationUseCase(
    BaseUseCase[ValidateInvitationRequest, ValidateInvitationResponse]
):
    """Use case for checking an invitation link before identity verification."""

    def __init__(self, invitation_service: InvitationService) -> None:
        self.invitation_service = invitation_service

    async def execute(
        self, request: ValidateInvitationRequest
    ) -> ValidateInvitationResponse:
        result = await self.invitation_service.validate_invitation(request.token)
        # model_dump drops the internal letter/case/token identifiers
        return ValidateInvitationResponse(**result.model_dump())
