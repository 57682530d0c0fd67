"""Auth use cases."""

from steno.application.usecase.auth.authenticate_staff import (
    AuthenticateStaffRequest,
    AuthenticateStaffResponse,
    AuthenticateStaffUseCase,
)

__all__ = [
    "AuthenticateStaffRequest",
    "AuthenticateStaffResponse",
    "AuthenticateStaffUseCase",
]
