"""Invitation use cases."""

from steno.application.usecase.invitation.create_invitation import (
    CreateInvitationRequest,
    CreateInvitationResponse,
    CreateInvitationUseCase,
)
from steno.application.usecase.invitation.get_invitation_status import (
    GetInvitationStatusRequest,
    GetInvitationStatusResponse,
    GetInvitationStatusUseCase,
)
from steno.application.usecase.invitation.revoke_invitation import (
    RevokeInvitationRequest,
    RevokeInvitationResponse,
    RevokeInvitationUseCase,
)
from steno.application.usecase.invitation.validate_invitation import (
    ValidateInvitationRequest,
    ValidateInvitationResponse,
    ValidateInvitationUseCase,
)

__all__ = [
    "CreateInvitationRequest",
    "CreateInvitationResponse",
    "CreateInvitationUseCase",
    "GetInvitationStatusRequest",
    "GetInvitationStatusResponse",
    "GetInvitationStatusUseCase",
    "RevokeInvitationRequest",
    "RevokeInvitationResponse",
    "RevokeInvitationUseCase",
    "ValidateInvitationRequest",
    "ValidateInvitationResponse",
    "ValidateInvitationUseCase",
]
