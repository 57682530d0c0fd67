"""Domain value objects for Steno."""

from steno.domain.value.identifiers import (
    CaseId,
    DebtorProfileId,
    LetterId,
    OrganizationId,
    SessionId,
    TokenId,
    UserId,
)
from steno.domain.value.types import (
    STAFF_ROLES,
    Email,
    ErrorCode,
    IdentityFragments,
    InvitationStatus,
    InvitationToken,
    RequestContext,
    UserRole,
)

__all__ = [
    # Identifiers
    "OrganizationId",
    "CaseId",
    "LetterId",
    "UserId",
    "DebtorProfileId",
    "SessionId",
    "TokenId",
    # Types
    "STAFF_ROLES",
    "Email",
    "ErrorCode",
    "IdentityFragments",
    "InvitationStatus",
    "InvitationToken",
    "RequestContext",
    "UserRole",
]
