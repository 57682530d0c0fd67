"""PostgreSQL repository implementations."""

from steno.persistence.repository.account import PostgresAccountRepository
from steno.persistence.repository.case import PostgresCaseRepository
from steno.persistence.repository.debtor_profile import PostgresDebtorProfileRepository
from steno.persistence.repository.letter import PostgresDemandLetterRepository
from steno.persistence.repository.user import PostgresUserRepository
from steno.persistence.repository.verification_grant import (
    PostgresVerificationGrantRepository,
)

__all__ = [
    "PostgresAccountRepository",
    "PostgresCaseRepository",
    "PostgresDebtorProfileRepository",
    "PostgresDemandLetterRepository",
    "PostgresUserRepository",
    "PostgresVerificationGrantRepository",
]
