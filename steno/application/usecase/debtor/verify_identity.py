"""Verify debtor identity use case."""

from datetime import datetime

from pydantic import BaseModel

from steno.application.usecase.base import BaseUseCase
from steno.domain.model.result import CasePreview
from steno.domain.service import VerificationService
from steno.domain.value import ErrorCode, IdentityFragments, RequestContext


class VerifyIdentityRequest(BaseModel):
    """Identity fragments presented with an invitation token."""

    token: str
    last_four_ssn: str | None = None
    date_of_birth: str | None = None
    account_number: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None


class VerifyIdentityResponse(BaseModel):
    """Verify identity response."""

    verified: bool
    case_preview: CasePreview | None = None
    verification_token: str | None = None
    attempts_remaining: int | None = None
    locked_until: datetime | None = None
    error_code: ErrorCode | None = None
    error_message: str | None = None


class VerifyIdentityUseCase(BaseUseCase[VerifyIdentityRequest, VerifyIdentityResponse]):
    """Use case for proving the invitation holder is the debtor."""

    def __init__(self, verification_service: VerificationService) -> None:
        """Initialize use case.

        Args:
            verification_service: Identity verification domain service
        """
        self.verification_service = verification_service

    async def execute(self, request: VerifyIdentityRequest) -> VerifyIdentityResponse:
        """Verify identity and, on success, return a verification grant.

        Args:
            request: Token, identity fragments and client metadata

        Returns:
            Verification outcome
        """
        outcome = await self.verification_service.verify_identity(
            request.token,
            IdentityFragments(
                last_four_ssn=request.last_four_ssn,
                date_of_birth=request.date_of_birth,
                account_number=request.account_number,
            ),
            RequestContext(
                ip_address=request.ip_address, user_agent=request.user_agent
            ),
        )
        return VerifyIdentityResponse(**outcome.model_dump())
