"""In-memory repository implementations for testing."""

from .account import InMemoryAccountRepository
from .case import InMemoryCaseRepository
from .debtor_profile import InMemoryDebtorProfileRepository
from .letter import InMemoryDemandLetterRepository
from .store import InMemoryStore
from .user import InMemoryUserRepository
from .verification_grant import InMemoryVerificationGrantRepository

__all__ = [
    "InMemoryAccountRepository",
    "InMemoryCaseRepository",
    "InMemoryDebtorProfileRepository",
    "InMemoryDemandLetterRepository",
    "InMemoryStore",
    "InMemoryUserRepository",
    "InMemoryVerificationGrantRepository",
]
