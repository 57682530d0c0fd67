"""Domain layer DI providers."""

from dishka import Scope, provide

from steno.config import AuthSettings, InvitationSettings, Settings
from steno.domain.repository import (
    AccountRepository,
    CaseRepository,
    DebtorProfileRepository,
    DemandLetterRepository,
    UserRepository,
    VerificationGrantRepository,
)
from steno.domain.service import (
    Encryptor,
    InvitationService,
    JWTService,
    PasswordHasher,
    RegistrationService,
    TokenCodec,
    VerificationService,
)
from steno.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction.
    """

    scope = Scope.REQUEST

    @provide
    def get_jwt_service(self, auth_settings: AuthSettings) -> JWTService:
        """Provide JWT token domain service."""
        return JWTService(auth_settings=auth_settings)

    @provide
    def get_token_codec(self, encryptor: Encryptor) -> TokenCodec:
        """Provide invitation token codec."""
        return TokenCodec(encryptor=encryptor)

    @provide
    def get_invitation_service(
        self,
        letter_repository: DemandLetterRepository,
        case_repository: CaseRepository,
        token_codec: TokenCodec,
        settings: Settings,
    ) -> InvitationService:
        """Provide invitation lifecycle domain service."""
        return InvitationService(
            letter_repository=letter_repository,
            case_repository=case_repository,
            token_codec=token_codec,
            invitation_settings=settings.invitations,
            invitation_base_url=settings.invitation_base_url,
        )

    @provide
    def get_verification_service(
        self,
        invitation_service: InvitationService,
        case_repository: CaseRepository,
        debtor_profile_repository: DebtorProfileRepository,
        password_hasher: PasswordHasher,
        jwt_service: JWTService,
        invitation_settings: InvitationSettings,
    ) -> VerificationService:
        """Provide identity verification domain service."""
        return VerificationService(
            invitation_service=invitation_service,
            case_repository=case_repository,
            debtor_profile_repository=debtor_profile_repository,
            password_hasher=password_hasher,
            jwt_service=jwt_service,
            invitation_settings=invitation_settings,
        )

    @provide
    def get_registration_service(
        self,
        invitation_service: InvitationService,
        jwt_service: JWTService,
        case_repository: CaseRepository,
        user_repository: UserRepository,
        debtor_profile_repository: DebtorProfileRepository,
        account_repository: AccountRepository,
        grant_repository: VerificationGrantRepository,
        password_hasher: PasswordHasher,
        invitation_settings: InvitationSettings,
    ) -> RegistrationService:
        """Provide account provisioning domain service."""
        return RegistrationService(
            invitation_service=invitation_service,
            jwt_service=jwt_service,
            case_repository=case_repository,
            user_repository=user_repository,
            debtor_profile_repository=debtor_profile_repository,
            account_repository=account_repository,
            grant_repository=grant_repository,
            password_hasher=password_hasher,
            invitation_settings=invitation_settings,
        )
