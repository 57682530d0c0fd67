"""Identity verification domain service."""

import hmac
from datetime import datetime, timedelta, timezone

import logfire

from steno.config import InvitationSettings
from steno.domain.model.case import Case
from steno.domain.model.result import CasePreview, VerificationOutcome
from steno.domain.repository import CaseRepository, DebtorProfileRepository
from steno.domain.service.crypto import PasswordHasher
from steno.domain.service.invitation_service import InvitationService
from steno.domain.service.jwt_service import JWTService
from steno.domain.value import ErrorCode, IdentityFragments, RequestContext

from .base import Service

MISMATCH_MESSAGE = "The information provided doesn't match our records."
LOCKED_MESSAGE = "Too many failed attempts. Please try again later."


class VerificationService(Service):
    """Lets the holder of a valid invitation prove they are the debtor.

    Failed attempts are counted per case. Reaching the threshold locks the
    case; while locked no stored identity data is consulted at all.
    """

    def __init__(
        self,
        invitation_service: InvitationService,
        case_repository: CaseRepository,
        debtor_profile_repository: DebtorProfileRepository,
        password_hasher: PasswordHasher,
        jwt_service: JWTService,
        invitation_settings: InvitationSettings,
    ) -> None:
        self.invitation_service = invitation_service
        self.case_repository = case_repository
        self.debtor_profile_repository = debtor_profile_repository
        self.password_hasher = password_hasher
        self.jwt_service = jwt_service
        self.settings = invitation_settings

    async def _matches(self, case: Case, fragments: IdentityFragments) -> bool:
        """Try SSN+DOB, then account number; either alone is enough."""
        if fragments.has_ssn_and_dob and case.debtor_ssn_hash and case.debtor_dob:
            ssn_ok = await self.password_hasher.verify(
                fragments.last_four_ssn or "", case.debtor_ssn_hash
            )
            dob_ok = hmac.compare_digest(
                (fragments.date_of_birth or "").encode("utf-8"),
                case.debtor_dob.isoformat().encode("utf-8"),
            )
            if ssn_ok and dob_ok:
                return True

        if fragments.account_number and case.account_number:
            return hmac.compare_digest(
                fragments.account_number.encode("utf-8"),
                case.account_number.encode("utf-8"),
            )

        return False

    def _locked(self, locked_until: datetime | None) -> VerificationOutcome:
        return VerificationOutcome(
            verified=False,
            attempts_remaining=0,
            locked_until=locked_until,
            error_code=ErrorCode.VERIFICATION_LOCKED,
            error_message=LOCKED_MESSAGE,
        )

    async def verify_identity(
        self,
        token: str,
        fragments: IdentityFragments,
        context: RequestContext | None = None,
    ) -> VerificationOutcome:
        """Verify identity fragments against the invitation's case.

        Args:
            token: Invitation token
            fragments: SSN last four + date of birth, or account number
            context: Client metadata for audit events

        Returns:
            On success a verification grant and a case preview; otherwise
            the failure code, with attempts remaining or the unlock time
        """
        context = context or RequestContext()
        with logfire.span(
            "verification_service.verify_identity",
            method=fragments.method,
            ip_address=context.ip_address,
        ):
            validation = await self.invitation_service.validate_invitation(token)
            if not validation.valid or validation.case_id is None:
                return VerificationOutcome(
                    verified=False,
                    error_code=validation.error_code,
                    error_message=validation.error_message,
                )

            case = await self.case_repository.find_by_id(validation.case_id)
            if not case:
                logfire.error(
                    "Case not found for valid invitation",
                    case_id=str(validation.case_id),
                )
                return VerificationOutcome(
                    verified=False,
                    error_code=ErrorCode.CASE_NOT_FOUND,
                    error_message="Case not found.",
                )

            if await self.debtor_profile_repository.find_by_case(case.id):
                logfire.info("Verification for registered case", case_id=str(case.id))
                return VerificationOutcome(
                    verified=False,
                    error_code=ErrorCode.ALREADY_REGISTERED,
                    error_message="An account has already been created for this case.",
                )

            now = datetime.now(timezone.utc)
            if case.is_locked(now):
                logfire.warn(
                    "Verification attempted while locked",
                    case_id=str(case.id),
                    locked_until=case.verification_locked_until,
                    ip_address=context.ip_address,
                )
                return self._locked(case.verification_locked_until)

            if not await self._matches(case, fragments):
                return await self._record_failure(case, now, context)

            await self.case_repository.reset_verification(case.id)
            grant = self.jwt_service.create_verification_grant(
                case.id, validation.letter_id, validation.token_id
            )
            logfire.info(
                "Identity verified",
                case_id=str(case.id),
                method=fragments.method,
                ip_address=context.ip_address,
            )
            return VerificationOutcome(
                verified=True,
                case_preview=CasePreview(
                    debtor_first_name=case.debtor_first_name,
                    creditor_name=case.creditor_name,
                    reference_number=case.reference_number,
                ),
                verification_token=grant,
            )

    async def _record_failure(
        self, case: Case, now: datetime, context: RequestContext
    ) -> VerificationOutcome:
        max_attempts = self.settings.max_verification_attempts
        lock_until = now + timedelta(minutes=self.settings.lockout_minutes)

        updated = await self.case_repository.record_failed_verification(
            case.id, max_attempts, lock_until, now
        )
        if updated is None:
            # A concurrent attempt locked the case first
            current = await self.case_repository.find_by_id(case.id)
            locked_until = current.verification_locked_until if current else lock_until
            logfire.warn("Verification locked concurrently", case_id=str(case.id))
            return self._locked(locked_until)

        if updated.is_locked(now):
            logfire.warn(
                "Verification locked",
                case_id=str(case.id),
                attempts=updated.verification_attempts,
                locked_until=updated.verification_locked_until,
                ip_address=context.ip_address,
            )
            outcome = self._locked(updated.verification_locked_until)
            return outcome.model_copy(update={"error_message": MISMATCH_MESSAGE})

        remaining = max(0, max_attempts - updated.verification_attempts)
        logfire.warn(
            "Verification failed",
            case_id=str(case.id),
            attempts=updated.verification_attempts,
            ip_address=context.ip_address,
        )
        return VerificationOutcome(
            verified=False,
            attempts_remaining=remaining,
            error_code=ErrorCode.VERIFICATION_FAILED,
            error_message=MISMATCH_MESSAGE,
        )
