"""Login session entity."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field

from steno.domain.model.common import DomainModel
from steno.domain.value import SessionId, UserId


class Session(DomainModel):
    """Server-side record backing a bearer session token."""

    id: SessionId
    user_id: UserId
    token_hash: str
    csrf_token: str
    expires_at: datetime
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
