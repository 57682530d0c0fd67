"""Debtor onboarding use cases."""

from steno.application.usecase.debtor.register_debtor import (
    RegisterDebtorRequest,
    RegisterDebtorResponse,
    RegisterDebtorUseCase,
)
from steno.application.usecase.debtor.verify_identity import (
    VerifyIdentityRequest,
    VerifyIdentityResponse,
    VerifyIdentityUseCase,
)

__all__ = [
    "RegisterDebtorRequest",
    "RegisterDebtorResponse",
    "RegisterDebtorUseCase",
    "VerifyIdentityRequest",
    "VerifyIdentityResponse",
    "VerifyIdentityUseCase",
]
