"""Strongly typed identifiers for Steno domain entities.

Using NewType for strong typing prevents mixing up different entity IDs
and makes the code more self-documenting.
"""

from typing import NewType
from uuid import UUID

OrganizationId = NewType("OrganizationId", UUID)
CaseId = NewType("CaseId", UUID)
LetterId = NewType("LetterId", UUID)
UserId = NewType("UserId", UUID)
DebtorProfileId = NewType("DebtorProfileId", UUID)
SessionId = NewType("SessionId", UUID)

# Non-secret lookup key embedded in every invitation token
TokenId = NewType("TokenId", str)
