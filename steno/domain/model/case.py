"""Case aggregate.

A case holds the debtor's identity data used to verify invitation holders,
and the per-case verification lockout state.
"""

from datetime import date, datetime, timezone
from typing import Optional

from pydantic import Field

from steno.domain.model.common import DomainModel
from steno.domain.value import CaseId, OrganizationId, UserId


class Case(DomainModel):
    """Debt collection case.

    ``debtor_ssn_hash`` is a password-hash of the SSN's last four digits;
    the raw digits are never stored.
    """

    id: CaseId
    organization_id: OrganizationId
    creditor_name: str
    debtor_name: Optional[str] = None
    debtor_email: Optional[str] = None
    reference_number: Optional[str] = None
    account_number: Optional[str] = None
    debtor_ssn_hash: Optional[str] = None
    debtor_dob: Optional[date] = None
    verification_attempts: int = Field(default=0, ge=0)
    verification_locked_until: Optional[datetime] = None
    debtor_user_id: Optional[UserId] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def is_locked(self, now: datetime) -> bool:
        return (
            self.verification_locked_until is not None
            and self.verification_locked_until > now
        )

    @property
    def debtor_first_name(self) -> str:
        if self.debtor_name and self.debtor_name.split():
            return self.debtor_name.split()[0]
        return "Valued Customer"
