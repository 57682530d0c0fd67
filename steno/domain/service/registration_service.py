"""Debtor account provisioning domain service."""

import hashlib
import secrets
from datetime import datetime, timezone
from uuid import uuid4

import logfire

from steno.config import InvitationSettings
from steno.domain.error import ConflictError
from steno.domain.model.debtor_profile import DebtorProfile
from steno.domain.model.result import RegistrationOutcome
from steno.domain.model.session import Session
from steno.domain.model.user import User
from steno.domain.repository import (
    AccountRepository,
    CaseRepository,
    DebtorProfileRepository,
    UserRepository,
    VerificationGrantRepository,
)
from steno.domain.repository.account import USER_EMAIL_CONSTRAINT
from steno.domain.service.crypto import PasswordHasher
from steno.domain.service.invitation_service import InvitationService
from steno.domain.service.jwt_service import JWTService
from steno.domain.value import (
    DebtorProfileId,
    Email,
    ErrorCode,
    RequestContext,
    SessionId,
    UserId,
    UserRole,
)
from steno.util.jwt import JWTError

from .base import Service

ALREADY_REGISTERED_MESSAGE = "An account has already been created for this case."
EMAIL_EXISTS_MESSAGE = "An account with this email already exists."
INVALID_GRANT_MESSAGE = "Verification expired. Please verify your identity again."


class RegistrationService(Service):
    """Turns a verification grant into a debtor account, exactly once."""

    def __init__(
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
    ) -> None:
        """Initialize registration service.

        Args:
            invitation_service: Invitation lifecycle service
            jwt_service: Grant verification and session token issuing
            case_repository: Case repository
            user_repository: User repository
            debtor_profile_repository: Debtor profile repository
            account_repository: Atomic account writes
            grant_repository: Spent verification grants
            password_hasher: Password hashing primitive
            invitation_settings: Terms version and policy
        """
        self.invitation_service = invitation_service
        self.jwt_service = jwt_service
        self.case_repository = case_repository
        self.user_repository = user_repository
        self.debtor_profile_repository = debtor_profile_repository
        self.account_repository = account_repository
        self.grant_repository = grant_repository
        self.password_hasher = password_hasher
        self.settings = invitation_settings

    async def register_debtor(
        self,
        token: str,
        verification_token: str,
        email: Email,
        password: str,
        accepted_terms: bool,
        context: RequestContext | None = None,
    ) -> RegistrationOutcome:
        """Register a debtor account for a verified invitation.

        Args:
            token: Invitation token (must still be valid)
            verification_token: Grant issued by identity verification
            email: Account email (normalized)
            password: Plaintext password, hashed before storage
            accepted_terms: Whether the terms of service were accepted
            context: Client metadata recorded on the profile and session

        Returns:
            The new user with a session token, or a typed failure
        """
        context = context or RequestContext()
        with logfire.span(
            "registration_service.register_debtor", ip_address=context.ip_address
        ):
            if not accepted_terms:
                return RegistrationOutcome(
                    success=False,
                    error_code=ErrorCode.TERMS_NOT_ACCEPTED,
                    error_message="You must accept the terms of service.",
                )

            validation = await self.invitation_service.validate_invitation(token)
            if (
                not validation.valid
                or validation.case_id is None
                or validation.token_id is None
            ):
                return RegistrationOutcome(
                    success=False,
                    error_code=validation.error_code,
                    error_message=validation.error_message,
                )

            invalid_grant = RegistrationOutcome(
                success=False,
                error_code=ErrorCode.INVALID_VERIFICATION_TOKEN,
                error_message=INVALID_GRANT_MESSAGE,
            )
            try:
                grant = self.jwt_service.verify_verification_grant(verification_token)
            except JWTError:
                return invalid_grant

            if grant.case_id != str(validation.case_id) or not secrets.compare_digest(
                grant.token_id.encode("utf-8"), validation.token_id.encode("utf-8")
            ):
                logfire.warn(
                    "Verification grant does not match invitation",
                    case_id=str(validation.case_id),
                )
                return invalid_grant

            if not await self.grant_repository.consume(grant.jti, grant.exp):
                logfire.warn(
                    "Verification grant replayed", case_id=str(validation.case_id)
                )
                return invalid_grant

            if await self.user_repository.find_by_email(email):
                return RegistrationOutcome(
                    success=False,
                    error_code=ErrorCode.EMAIL_EXISTS,
                    error_message=EMAIL_EXISTS_MESSAGE,
                )

            case = await self.case_repository.find_by_id(validation.case_id)
            if not case:
                return RegistrationOutcome(
                    success=False,
                    error_code=ErrorCode.CASE_NOT_FOUND,
                    error_message="Case not found.",
                )

            if await self.debtor_profile_repository.find_by_case(case.id):
                return RegistrationOutcome(
                    success=False,
                    error_code=ErrorCode.ALREADY_REGISTERED,
                    error_message=ALREADY_REGISTERED_MESSAGE,
                )

            password_hash = await self.password_hasher.hash(password)

            now = datetime.now(timezone.utc)
            user = User(
                id=UserId(uuid4()),
                organization_id=case.organization_id,
                email=email,
                password_hash=password_hash,
                role=UserRole.DEBTOR,
                email_verified=True,
                created_at=now,
            )
            profile = DebtorProfile(
                id=DebtorProfileId(uuid4()),
                user_id=user.id,
                case_id=case.id,
                invitation_token_id=validation.token_id,
                terms_accepted_at=now,
                terms_accepted_ip=context.ip_address,
                terms_version=self.settings.terms_version,
                created_at=now,
            )
            session_id = SessionId(uuid4())
            session = Session(
                id=session_id,
                user_id=user.id,
                token_hash=hashlib.sha256(session_id.hex.encode("ascii")).hexdigest(),
                csrf_token=secrets.token_hex(32),
                expires_at=self.jwt_service.session_expiry(),
                ip_address=context.ip_address,
                user_agent=context.user_agent,
                created_at=now,
            )

            try:
                await self.account_repository.create_debtor_account(
                    user, profile, session
                )
            except ConflictError as e:
                logfire.warn(
                    "Registration rejected by uniqueness constraint",
                    case_id=str(case.id),
                    constraint=e.constraint,
                )
                if e.constraint == USER_EMAIL_CONSTRAINT:
                    return RegistrationOutcome(
                        success=False,
                        error_code=ErrorCode.EMAIL_EXISTS,
                        error_message=EMAIL_EXISTS_MESSAGE,
                    )
                return RegistrationOutcome(
                    success=False,
                    error_code=ErrorCode.ALREADY_REGISTERED,
                    error_message=ALREADY_REGISTERED_MESSAGE,
                )

            # The account is committed; a failed usage bump is reconciled later
            try:
                redemption = await self.invitation_service.redeem_invitation(token)
                if not redemption.success:
                    logfire.error(
                        "Invitation redemption failed after registration",
                        case_id=str(case.id),
                        user_id=str(user.id),
                        error_code=redemption.error_code,
                    )
            except Exception:
                logfire.exception(
                    "Invitation redemption raised after registration",
                    case_id=str(case.id),
                    user_id=str(user.id),
                )

            session_token = self.jwt_service.create_session_token(
                user_id=str(user.id),
                email=user.email.root,
                role=user.role.value,
                organization_id=str(user.organization_id),
                session_id=str(session_id),
                expires_at=session.expires_at,
            )

            logfire.info(
                "Debtor registered",
                user_id=str(user.id),
                case_id=str(case.id),
                ip_address=context.ip_address,
            )
            return RegistrationOutcome(
                success=True,
                user_id=user.id,
                email=user.email.root,
                role=user.role,
                case_id=case.id,
                session_token=session_token,
            )
