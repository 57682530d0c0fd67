"""Repository interfaces for the Steno domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from steno.domain.repository.account import AccountRepository
from steno.domain.repository.case import CaseRepository
from steno.domain.repository.debtor_profile import DebtorProfileRepository
from steno.domain.repository.letter import DemandLetterRepository
from steno.domain.repository.user import UserRepository
from steno.domain.repository.verification_grant import VerificationGrantRepository

__all__ = [
    "AccountRepository",
    "CaseRepository",
    "DebtorProfileRepository",
    "DemandLetterRepository",
    "UserRepository",
    "VerificationGrantRepository",
]
