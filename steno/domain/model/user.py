"""User aggregate root."""

from datetime import datetime, timezone

from pydantic import Field

from steno.domain.model.common import DomainModel
from steno.domain.value import Email, OrganizationId, UserId, UserRole


class User(DomainModel):
    """Platform user. Debtors are created only through invitation registration."""

    id: UserId
    organization_id: OrganizationId
    email: Email
    password_hash: str
    role: UserRole
    email_verified: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
