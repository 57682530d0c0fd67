"""Debtor profile entity.

Links a debtor user to exactly one case. At most one profile exists per case.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field

from steno.domain.model.common import DomainModel
from steno.domain.value import CaseId, DebtorProfileId, TokenId, UserId


class DebtorProfile(DomainModel):
    """Debtor profile recording consent and the redeeming invitation."""

    id: DebtorProfileId
    user_id: UserId
    case_id: CaseId
    invitation_token_id: TokenId
    terms_accepted_at: datetime
    terms_accepted_ip: Optional[str] = None
    terms_version: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
