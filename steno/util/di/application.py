"""Application layer DI providers."""

from dishka import Scope, provide

from steno.application.usecase.auth import AuthenticateStaffUseCase
from steno.application.usecase.debtor import (
    RegisterDebtorUseCase,
    VerifyIdentityUseCase,
)
from steno.application.usecase.invitation import (
    CreateInvitationUseCase,
    GetInvitationStatusUseCase,
    RevokeInvitationUseCase,
    ValidateInvitationUseCase,
)
from steno.domain.service import (
    InvitationService,
    JWTService,
    RegistrationService,
    VerificationService,
)
from steno.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed.

    Use cases are REQUEST-scoped since they depend on request-scoped services.
    """

    scope = Scope.REQUEST

    @provide
    def get_authenticate_staff_use_case(
        self, jwt_service: JWTService
    ) -> AuthenticateStaffUseCase:
        """Provide authenticate staff use case."""
        return AuthenticateStaffUseCase(jwt_service=jwt_service)

    @provide
    def get_create_invitation_use_case(
        self, invitation_service: InvitationService
    ) -> CreateInvitationUseCase:
        """Provide create invitation use case."""
        return CreateInvitationUseCase(invitation_service=invitation_service)

    @provide
    def get_validate_invitation_use_case(
        self, invitation_service: InvitationService
    ) -> ValidateInvitationUseCase:
        """Provide validate invitation use case."""
        return ValidateInvitationUseCase(invitation_service=invitation_service)

    @provide
    def get_revoke_invitation_use_case(
        self, invitation_service: InvitationService
    ) -> RevokeInvitationUseCase:
        """Provide revoke invitation use case."""
        return RevokeInvitationUseCase(invitation_service=invitation_service)

    @provide
    def get_invitation_status_use_case(
        self, invitation_service: InvitationService
    ) -> GetInvitationStatusUseCase:
        """Provide invitation status use case."""
        return GetInvitationStatusUseCase(invitation_service=invitation_service)

    @provide
    def get_verify_identity_use_case(
        self, verification_service: VerificationService
    ) -> VerifyIdentityUseCase:
        """Provide verify identity use case."""
        return VerifyIdentityUseCase(verification_service=verification_service)

    @provide
    def get_register_debtor_use_case(
        self, registration_service: RegistrationService
    ) -> RegisterDebtorUseCase:
        """Provide register debtor use case."""
        return RegisterDebtorUseCase(registration_service=registration_service)
