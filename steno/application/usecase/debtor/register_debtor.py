"""Register debtor use case."""

from pydantic import BaseModel

from steno.application.usecase.base import BaseUseCase
from steno.domain.service import RegistrationService
from steno.domain.value import (
    CaseId,
    Email,
    ErrorCode,
    RequestContext,
    UserId,
    UserRole,
)


class RegisterDebtorRequest(BaseModel):
    """Registration details presented with a verification grant."""

    token: str
    verification_token: str
    email: str
    password: str
    accepted_terms: bool
    ip_address: str | None = None
    user_agent: str | None = None


class RegisterDebtorResponse(BaseModel):
    """Register debtor response."""

    success: bool
    user_id: UserId | None = None
    email: str | None = None
    role: UserRole | None = None
    case_id: CaseId | None = None
    session_token: str | None = None
    error_code: ErrorCode | None = None
    error_message: str | None = None


class RegisterDebtorUseCase(BaseUseCase[RegisterDebtorRequest, RegisterDebtorResponse]):
    """Use case for provisioning a debtor account from a verified invitation."""

    def __init__(self, registration_service: RegistrationService) -> None:
        """Initialize use case.

        Args:
            registration_service: Account provisioning domain service
        """
        self.registration_service = registration_service

    async def execute(self, request: RegisterDebtorRequest) -> RegisterDebtorResponse:
        """Register the debtor.

        Args:
            request: Tokens, credentials, consent and client metadata

        Returns:
            The new account and session token, or a typed failure

        Raises:
            ValidationError: If the email is not a valid address
        """
        outcome = await self.registration_service.register_debtor(
            token=request.token,
            verification_token=request.verification_token,
            email=Email(request.email),
            password=request.password,
            accepted_terms=request.accepted_terms,
            context=RequestContext(
                ip_address=request.ip_address, user_agent=request.user_agent
            ),
        )
        return RegisterDebtorResponse(**outcome.model_dump())
