"""Domain value objects for Steno.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

from enum import Enum

from pydantic import EmailStr, field_validator

from steno.domain.value.common import RootValueObject, ValueObject


class InvitationStatus(str, Enum):
    """Derived status of an invitation.

    Never stored: computed from the revocation stamp, expiry and usage
    counters each time it is needed. When several conditions hold at once
    the first match in this order wins: revoked, expired, exhausted.
    """

    ACTIVE = "active"
    EXPIRED = "expired"
    REVOKED = "revoked"
    EXHAUSTED = "exhausted"


class UserRole(str, Enum):
    """Roles known to the platform."""

    FIRM_ADMIN = "FIRM_ADMIN"
    ATTORNEY = "ATTORNEY"
    PARALEGAL = "PARALEGAL"
    DEBTOR = "DEBTOR"
    PUBLIC_DEFENDER = "PUBLIC_DEFENDER"


STAFF_ROLES = frozenset({UserRole.FIRM_ADMIN, UserRole.ATTORNEY, UserRole.PARALEGAL})


class ErrorCode(str, Enum):
    """Closed set of failure codes returned by invitation operations."""

    # Staff-side lifecycle
    NOT_FOUND = "NOT_FOUND"
    INVITATION_EXISTS = "INVITATION_EXISTS"
    NO_INVITATION = "NO_INVITATION"
    ALREADY_REVOKED = "ALREADY_REVOKED"

    # Token validation
    MALFORMED = "MALFORMED"
    INVALID_TOKEN = "INVALID_TOKEN"
    REVOKED = "REVOKED"
    EXPIRED = "EXPIRED"
    EXHAUSTED = "EXHAUSTED"

    # Identity verification
    CASE_NOT_FOUND = "CASE_NOT_FOUND"
    ALREADY_REGISTERED = "ALREADY_REGISTERED"
    VERIFICATION_LOCKED = "VERIFICATION_LOCKED"
    VERIFICATION_FAILED = "VERIFICATION_FAILED"

    # Registration
    TERMS_NOT_ACCEPTED = "TERMS_NOT_ACCEPTED"
    INVALID_VERIFICATION_TOKEN = "INVALID_VERIFICATION_TOKEN"
    EMAIL_EXISTS = "EMAIL_EXISTS"


class InvitationToken(RootValueObject[str]):
    """Opaque, URL-safe invitation token handed to the debtor."""

    @field_validator("root")
    @classmethod
    def validate_token_format(cls, v: str) -> str:
        """Validate token is not empty and bounded."""
        if len(v) < 1 or len(v) > 2048:
            raise ValueError("Token must be 1-2048 characters")
        return v


class Email(RootValueObject[EmailStr]):
    """Normalized (lower-cased, trimmed) email address.

    Syntax is checked by email-validator, the same as request bodies.
    """

    @field_validator("root", mode="before")
    @classmethod
    def normalize_email(cls, v: object) -> object:
        """Trim and lower-case before validation."""
        if isinstance(v, str):
            return v.strip().lower()
        return v


class IdentityFragments(ValueObject):
    """Identity fragments a debtor supplies to prove who they are.

    Either ``last_four_ssn`` together with ``date_of_birth`` (YYYY-MM-DD),
    or ``account_number`` alone.
    """

    last_four_ssn: str | None = None
    date_of_birth: str | None = None
    account_number: str | None = None

    @property
    def has_ssn_and_dob(self) -> bool:
        return bool(self.last_four_ssn and self.date_of_birth)

    @property
    def method(self) -> str:
        """Name of the method attempted, for audit events."""
        return "account_number" if self.account_number else "ssn_dob"


class RequestContext(ValueObject):
    """Client metadata captured from the incoming request."""

    ip_address: str | None = None
    user_agent: str | None = None
