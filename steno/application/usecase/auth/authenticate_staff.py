"""Authenticate staff use case."""

from uuid import UUID

from pydantic import BaseModel

from steno.application.usecase.base import BaseUseCase
from steno.domain.error import AuthorizationError
from steno.domain.service import JWTService
from steno.domain.value import STAFF_ROLES, OrganizationId, UserId, UserRole


class AuthenticateStaffRequest(BaseModel):
    """Authenticate staff request."""

    token: str  # Session JWT


class AuthenticateStaffResponse(BaseModel):
    """Staff principal taken from the session token."""

    user_id: UserId
    organization_id: OrganizationId
    role: UserRole


class AuthenticateStaffUseCase(
    BaseUseCase[AuthenticateStaffRequest, AuthenticateStaffResponse]
):
    """Resolves a bearer session token to a staff principal."""

    def __init__(self, jwt_service: JWTService) -> None:
        """Initialize use case.

        Args:
            jwt_service: JWT token domain service
        """
        self.jwt_service = jwt_service

    async def execute(
        self, request: AuthenticateStaffRequest
    ) -> AuthenticateStaffResponse:
        """Verify the session token and check the role.

        Args:
            request: Request with session token

        Returns:
            The staff member's identity and organization

        Raises:
            JWTError: If token is invalid or expired
            AuthorizationError: If the role may not manage invitations
        """
        payload = self.jwt_service.verify_session_token(request.token)

        try:
            role = UserRole(payload.role)
        except ValueError:
            raise AuthorizationError(f"Unknown role: {payload.role}")
        if role not in STAFF_ROLES:
            raise AuthorizationError("Insufficient permissions")

        return AuthenticateStaffResponse(
            user_id=UserId(UUID(payload.sub)),
            organization_id=OrganizationId(UUID(payload.organization_id)),
            role=role,
        )
