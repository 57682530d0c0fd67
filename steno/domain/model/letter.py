"""Demand letter entity (the carrier of an invitation)."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field

from steno.domain.model.common import DomainModel
from steno.domain.model.invitation import Invitation
from steno.domain.value import CaseId, LetterId, OrganizationId


class DemandLetter(DomainModel):
    """Demand letter sent for a case.

    Only the fields the invitation flow needs are modelled here.
    """

    id: LetterId
    case_id: CaseId
    organization_id: OrganizationId
    invitation: Optional[Invitation] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
