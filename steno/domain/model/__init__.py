"""Domain model entities for Steno."""

from steno.domain.model.case import Case
from steno.domain.model.debtor_profile import DebtorProfile
from steno.domain.model.invitation import (
    Invitation,
    InvitationClaims,
    InvitationPayload,
)
from steno.domain.model.letter import DemandLetter
from steno.domain.model.session import Session
from steno.domain.model.user import User

__all__ = [
    "Case",
    "DebtorProfile",
    "DemandLetter",
    "Invitation",
    "InvitationClaims",
    "InvitationPayload",
    "Session",
    "User",
]
