"""Typed outcomes of invitation operations.

Every expected failure is a result with ``error_code`` set, never an
exception, so the HTTP layer can branch on the code to pick a status and
user-facing copy.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from steno.domain.value import (
    CaseId,
    ErrorCode,
    InvitationStatus,
    LetterId,
    TokenId,
    UserId,
    UserRole,
)


class CreatedInvitation(BaseModel):
    """Outcome of creating an invitation for a demand letter."""

    success: bool
    invitation_url: Optional[str] = None
    token: Optional[str] = None
    expires_at: Optional[datetime] = None
    usage_limit: Optional[int] = None
    status: Optional[InvitationStatus] = None
    error_code: Optional[ErrorCode] = None
    error_message: Optional[str] = None


class InvitationValidation(BaseModel):
    """Outcome of validating an invitation token.

    The letter/case/token identifiers are kept for internal callers only and
    are never serialized to an unauthenticated client.
    """

    valid: bool
    status: Optional[InvitationStatus] = None
    case_reference: Optional[str] = None
    expires_at: Optional[datetime] = None
    remaining_uses: Optional[int] = None  # -1 means unlimited
    error_code: Optional[ErrorCode] = None
    error_message: Optional[str] = None

    letter_id: Optional[LetterId] = Field(default=None, exclude=True)
    case_id: Optional[CaseId] = Field(default=None, exclude=True)
    token_id: Optional[TokenId] = Field(default=None, exclude=True)


class Redemption(BaseModel):
    """Outcome of consuming one use of an invitation."""

    success: bool
    letter_id: Optional[LetterId] = None
    case_id: Optional[CaseId] = None
    error_code: Optional[ErrorCode] = None


class RevokedInvitation(BaseModel):
    """Outcome of revoking an invitation."""

    success: bool
    revoked_at: Optional[datetime] = None
    error_code: Optional[ErrorCode] = None
    error_message: Optional[str] = None


class InvitationStatusSummary(BaseModel):
    """Staff-side view of a letter's invitation."""

    found: bool = True
    has_invitation: bool = False
    invitation_url: Optional[str] = None
    token: Optional[str] = None
    expires_at: Optional[datetime] = None
    usage_limit: Optional[int] = None
    usage_count: Optional[int] = None
    status: Optional[InvitationStatus] = None
    revoked_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    error_code: Optional[ErrorCode] = None
    error_message: Optional[str] = None


class CasePreview(BaseModel):
    """Details already implied by having received the letter."""

    debtor_first_name: str
    creditor_name: str
    reference_number: Optional[str] = None


class VerificationOutcome(BaseModel):
    """Outcome of an identity verification attempt."""

    verified: bool
    case_preview: Optional[CasePreview] = None
    verification_token: Optional[str] = None
    attempts_remaining: Optional[int] = None
    locked_until: Optional[datetime] = None
    error_code: Optional[ErrorCode] = None
    error_message: Optional[str] = None


class RegistrationOutcome(BaseModel):
    """Outcome of provisioning a debtor account."""

    success: bool
    user_id: Optional[UserId] = None
    email: Optional[str] = None
    role: Optional[UserRole] = None
    case_id: Optional[CaseId] = None
    session_token: Optional[str] = None
    error_code: Optional[ErrorCode] = None
    error_message: Optional[str] = None
