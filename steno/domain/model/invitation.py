"""Invitation entity and its encrypted payload.

An invitation is embedded in a demand letter: each letter carries at most one
invitation at a time. Invitations are never deleted; dead ones stay on the
letter for audit until a new invitation replaces them.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import ConfigDict, Field

from steno.domain.model.common import DomainModel
from steno.domain.value import (
    CaseId,
    InvitationStatus,
    InvitationToken,
    LetterId,
    OrganizationId,
    TokenId,
)


class InvitationClaims(DomainModel):
    """Payload fields known before a token id has been generated."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    case_id: CaseId
    letter_id: LetterId
    debtor_hash: str  # One-way hash of the debtor's known identifiers
    organization_id: OrganizationId
    expires_at: datetime
    created_at: datetime
    usage_limit: int = Field(ge=0)


class InvitationPayload(InvitationClaims):
    """Full payload sealed inside an invitation token.

    ``version`` lets the shape evolve: a payload that decrypts but does not
    match a known version is rejected as a schema mismatch.
    """

    version: Literal[1] = 1
    token_id: TokenId


class Invitation(DomainModel):
    """Invitation state as persisted on the demand letter.

    Business rules:
    - ``usage_limit`` 0 means unlimited
    - ``usage_count`` only ever grows, by one per successful redemption
    - ``revoked_at`` is a permanent kill switch, independent of expiry/usage
    - unusable at or after ``expires_at``
    """

    token: InvitationToken
    token_id: TokenId
    encrypted_payload: str
    expires_at: datetime
    usage_limit: int = Field(ge=0)
    usage_count: int = Field(default=0, ge=0)
    revoked_at: Optional[datetime] = None
    created_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def is_exhausted(self) -> bool:
        return self.usage_limit > 0 and self.usage_count >= self.usage_limit

    def status_at(self, now: datetime) -> InvitationStatus:
        """Derive the status at ``now``: revoked > expired > exhausted > active."""
        if self.revoked_at is not None:
            return InvitationStatus.REVOKED
        if self.is_expired(now):
            return InvitationStatus.EXPIRED
        if self.is_exhausted():
            return InvitationStatus.EXHAUSTED
        return InvitationStatus.ACTIVE

    def remaining_uses(self) -> int:
        """Uses left, or -1 when unlimited."""
        if self.usage_limit == 0:
            return -1
        return max(0, self.usage_limit - self.usage_count)
