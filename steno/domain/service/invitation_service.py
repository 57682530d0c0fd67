"""Invitation lifecycle domain service."""

import hashlib
from datetime import datetime, timedelta, timezone

import logfire

from steno.config import InvitationSettings
from steno.domain.model.case import Case
from steno.domain.model.invitation import Invitation, InvitationClaims
from steno.domain.model.result import (
    CreatedInvitation,
    InvitationStatusSummary,
    InvitationValidation,
    Redemption,
    RevokedInvitation,
)
from steno.domain.repository import CaseRepository, DemandLetterRepository
from steno.domain.service.token_codec import TokenCodec
from steno.domain.value import (
    ErrorCode,
    InvitationStatus,
    LetterId,
    OrganizationId,
)

from .base import Service

# Deliberately identical for unknown, malformed and revoked tokens
UNUSABLE_MESSAGE = "This invitation link is no longer valid."

STATUS_ERRORS: dict[InvitationStatus, tuple[ErrorCode, str]] = {
    InvitationStatus.REVOKED: (ErrorCode.REVOKED, UNUSABLE_MESSAGE),
    InvitationStatus.EXPIRED: (ErrorCode.EXPIRED, "This invitation has expired."),
    InvitationStatus.EXHAUSTED: (
        ErrorCode.EXHAUSTED,
        "This invitation has already been used.",
    ),
}


def mask_debtor_name(name: str | None) -> str:
    """Partially redact a debtor name for unauthenticated display."""
    if not name or len(name) <= 3:
        return "***"
    return f"{name[:2]}***{name[-1]}"


def format_case_reference(case: Case) -> str:
    return f"Case: {mask_debtor_name(case.debtor_name)} v. {case.creditor_name}"


def hash_debtor_identifier(email: str | None, name: str | None) -> str:
    """One-way hash of the debtor's known identifiers, truncated to 16 hex chars."""
    material = f"{email or ''}:{name or ''}".lower().strip()
    return hashlib.sha256(material.encode("utf-8")).hexdigest()[:16]


def _short(token_id: str) -> str:
    return token_id[:8] + "..."


class InvitationService(Service):
    """Domain service for creating, validating, redeeming and revoking invitations.

    Status is derived on every call from the invitation's timestamps and
    counters; nothing but ``revoked_at`` is ever stored as state.
    """

    def __init__(
        self,
        letter_repository: DemandLetterRepository,
        case_repository: CaseRepository,
        token_codec: TokenCodec,
        invitation_settings: InvitationSettings,
        invitation_base_url: str,
    ) -> None:
        """Initialize invitation service.

        Args:
            letter_repository: Demand letter repository
            case_repository: Case repository
            token_codec: Invitation token codec
            invitation_settings: Expiry, usage and lockout policy
            invitation_base_url: Prefix the token is appended to
        """
        self.letter_repository = letter_repository
        self.case_repository = case_repository
        self.token_codec = token_codec
        self.settings = invitation_settings
        self.invitation_base_url = invitation_base_url.rstrip("/")

    def build_invitation_url(self, token: str) -> str:
        return f"{self.invitation_base_url}/{token}"

    def _normalize_expiration_days(self, expiration_days: int | None) -> int:
        if expiration_days is None:
            expiration_days = self.settings.default_expiration_days
        return min(max(expiration_days, 1), self.settings.max_expiration_days)

    def _normalize_usage_limit(self, usage_limit: int | None) -> int:
        if usage_limit is None:
            usage_limit = self.settings.default_usage_limit
        return max(usage_limit, 0)

    async def create_invitation(
        self,
        letter_id: LetterId,
        organization_id: OrganizationId,
        expiration_days: int | None = None,
        usage_limit: int | None = None,
    ) -> CreatedInvitation:
        """Create an invitation for a demand letter.

        A letter holds at most one active invitation; the previous one must be
        revoked or dead before a new one replaces it.

        Args:
            letter_id: Letter to attach the invitation to
            organization_id: Organization of the acting staff member
            expiration_days: Days until expiry, clamped into [1, max]
            usage_limit: Allowed redemptions, 0 for unlimited

        Returns:
            Created invitation, or NOT_FOUND / INVITATION_EXISTS
        """
        with logfire.span(
            "invitation_service.create_invitation",
            letter_id=str(letter_id),
            organization_id=str(organization_id),
        ):
            letter = await self.letter_repository.find_by_id(
                letter_id, organization_id
            )
            if not letter:
                logfire.warn("Letter not found", letter_id=str(letter_id))
                return CreatedInvitation(
                    success=False,
                    error_code=ErrorCode.NOT_FOUND,
                    error_message="Letter not found.",
                )

            case = await self.case_repository.find_by_id(letter.case_id)
            if not case:
                logfire.error(
                    "Case missing for letter",
                    letter_id=str(letter_id),
                    case_id=str(letter.case_id),
                )
                return CreatedInvitation(
                    success=False,
                    error_code=ErrorCode.NOT_FOUND,
                    error_message="Letter not found.",
                )

            now = datetime.now(timezone.utc)
            if (
                letter.invitation
                and letter.invitation.status_at(now) == InvitationStatus.ACTIVE
            ):
                logfire.warn(
                    "Active invitation already exists",
                    letter_id=str(letter_id),
                    token_id=_short(letter.invitation.token_id),
                )
                return CreatedInvitation(
                    success=False,
                    error_code=ErrorCode.INVITATION_EXISTS,
                    error_message=(
                        "An active invitation already exists for this letter. "
                        "Revoke it first."
                    ),
                )

            days = self._normalize_expiration_days(expiration_days)
            limit = self._normalize_usage_limit(usage_limit)
            expires_at = now + timedelta(days=days)

            claims = InvitationClaims(
                case_id=letter.case_id,
                letter_id=letter.id,
                debtor_hash=hash_debtor_identifier(case.debtor_email, case.debtor_name),
                organization_id=organization_id,
                expires_at=expires_at,
                created_at=now,
                usage_limit=limit,
            )
            issued = await self.token_codec.issue_token(claims)

            invitation = Invitation(
                token=issued.token,
                token_id=issued.token_id,
                encrypted_payload=issued.ciphertext,
                expires_at=expires_at,
                usage_limit=limit,
                usage_count=0,
                revoked_at=None,
                created_at=now,
            )
            await self.letter_repository.save_invitation(letter.id, invitation)

            logfire.info(
                "Invitation created",
                letter_id=str(letter_id),
                case_id=str(letter.case_id),
                token_id=_short(issued.token_id),
                expiration_days=days,
                usage_limit=limit,
            )
            return CreatedInvitation(
                success=True,
                invitation_url=self.build_invitation_url(issued.token.root),
                token=issued.token.root,
                expires_at=expires_at,
                usage_limit=limit,
                status=InvitationStatus.ACTIVE,
            )

    async def validate_invitation(self, token: str) -> InvitationValidation:
        """Validate an invitation token.

        Args:
            token: Token as presented by the caller

        Returns:
            Validation result; on success carries the masked case reference
        """
        with logfire.span("invitation_service.validate_invitation"):
            token_id = self.token_codec.parse_token_id(token)
            if token_id is None:
                logfire.info("Malformed invitation token")
                return InvitationValidation(
                    valid=False,
                    error_code=ErrorCode.MALFORMED,
                    error_message=UNUSABLE_MESSAGE,
                )

            letter = await self.letter_repository.find_by_token_id(token_id)
            if not letter or not letter.invitation:
                logfire.info("Unknown invitation token", token_id=_short(token_id))
                return InvitationValidation(
                    valid=False,
                    error_code=ErrorCode.INVALID_TOKEN,
                    error_message=UNUSABLE_MESSAGE,
                )

            invitation = letter.invitation
            status = invitation.status_at(datetime.now(timezone.utc))
            if status != InvitationStatus.ACTIVE:
                error_code, message = STATUS_ERRORS[status]
                logfire.info(
                    "Invitation not usable",
                    token_id=_short(token_id),
                    status=status.value,
                )
                return InvitationValidation(
                    valid=False,
                    status=status,
                    remaining_uses=invitation.remaining_uses(),
                    error_code=error_code,
                    error_message=message,
                )

            payload = await self.token_codec.open_token(token)
            if (
                payload is None
                or payload.letter_id != letter.id
                or payload.case_id != letter.case_id
            ):
                logfire.warn(
                    "Invitation payload failed integrity check",
                    token_id=_short(token_id),
                    letter_id=str(letter.id),
                )
                return InvitationValidation(
                    valid=False,
                    error_code=ErrorCode.INVALID_TOKEN,
                    error_message=UNUSABLE_MESSAGE,
                )

            case = await self.case_repository.find_by_id(letter.case_id)

            logfire.info(
                "Invitation validated",
                token_id=_short(token_id),
                letter_id=str(letter.id),
            )
            return InvitationValidation(
                valid=True,
                status=status,
                case_reference=format_case_reference(case) if case else None,
                expires_at=invitation.expires_at,
                remaining_uses=invitation.remaining_uses(),
                letter_id=letter.id,
                case_id=letter.case_id,
                token_id=token_id,
            )

    async def redeem_invitation(self, token: str) -> Redemption:
        """Consume one use of an invitation.

        The use is taken with a single conditional update, so concurrent
        redemptions can never exceed the usage limit.

        Args:
            token: Token as presented by the caller

        Returns:
            Redemption result with the letter and case on success
        """
        with logfire.span("invitation_service.redeem_invitation"):
            validation = await self.validate_invitation(token)
            if not validation.valid or validation.token_id is None:
                return Redemption(success=False, error_code=validation.error_code)

            now = datetime.now(timezone.utc)
            letter = await self.letter_repository.increment_usage(
                validation.token_id, now
            )
            if not letter or not letter.invitation:
                current = await self.letter_repository.find_by_token_id(
                    validation.token_id
                )
                error_code = ErrorCode.EXHAUSTED
                if current and current.invitation:
                    status = current.invitation.status_at(now)
                    if status in STATUS_ERRORS:
                        error_code = STATUS_ERRORS[status][0]
                logfire.warn(
                    "Invitation redemption lost race",
                    token_id=_short(validation.token_id),
                    error_code=error_code.value,
                )
                return Redemption(success=False, error_code=error_code)

            logfire.info(
                "Invitation redeemed",
                token_id=_short(validation.token_id),
                letter_id=str(letter.id),
                usage_count=letter.invitation.usage_count,
            )
            return Redemption(success=True, letter_id=letter.id, case_id=letter.case_id)

    async def revoke_invitation(
        self, letter_id: LetterId, organization_id: OrganizationId
    ) -> RevokedInvitation:
        """Permanently revoke a letter's invitation.

        Leaves expiry and usage untouched.

        Args:
            letter_id: Letter whose invitation to revoke
            organization_id: Organization of the acting staff member

        Returns:
            Revocation timestamp, or NOT_FOUND / NO_INVITATION / ALREADY_REVOKED
        """
        with logfire.span(
            "invitation_service.revoke_invitation", letter_id=str(letter_id)
        ):
            letter = await self.letter_repository.find_by_id(
                letter_id, organization_id
            )
            if not letter:
                return RevokedInvitation(
                    success=False,
                    error_code=ErrorCode.NOT_FOUND,
                    error_message="Letter not found.",
                )
            if not letter.invitation:
                return RevokedInvitation(
                    success=False,
                    error_code=ErrorCode.NO_INVITATION,
                    error_message="No invitation exists for this letter.",
                )

            already = RevokedInvitation(
                success=False,
                error_code=ErrorCode.ALREADY_REVOKED,
                error_message="Invitation has already been revoked.",
            )
            if letter.invitation.revoked_at is not None:
                return already

            revoked_at = datetime.now(timezone.utc)
            if not await self.letter_repository.revoke(letter.id, revoked_at):
                return already

            logfire.info(
                "Invitation revoked",
                letter_id=str(letter_id),
                token_id=_short(letter.invitation.token_id),
            )
            return RevokedInvitation(success=True, revoked_at=revoked_at)

    async def get_invitation_status(
        self, letter_id: LetterId, organization_id: OrganizationId
    ) -> InvitationStatusSummary:
        """Staff-side view of a letter's invitation, with full detail."""
        with logfire.span(
            "invitation_service.get_invitation_status", letter_id=str(letter_id)
        ):
            letter = await self.letter_repository.find_by_id(
                letter_id, organization_id
            )
            if not letter:
                return InvitationStatusSummary(
                    found=False,
                    error_code=ErrorCode.NOT_FOUND,
                    error_message="Letter not found.",
                )
            invitation = letter.invitation
            if not invitation:
                return InvitationStatusSummary(has_invitation=False)

            return InvitationStatusSummary(
                has_invitation=True,
                invitation_url=self.build_invitation_url(invitation.token.root),
                token=invitation.token.root,
                expires_at=invitation.expires_at,
                usage_limit=invitation.usage_limit,
                usage_count=invitation.usage_count,
                status=invitation.status_at(datetime.now(timezone.utc)),
                revoked_at=invitation.revoked_at,
                created_at=invitation.created_at,
            )
