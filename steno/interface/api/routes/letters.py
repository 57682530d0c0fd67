"""Staff routes for managing a demand letter's invitation."""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, Header, HTTPException, status
from pydantic import BaseModel

from steno.application.usecase.auth import (
    AuthenticateStaffRequest,
    AuthenticateStaffResponse,
    AuthenticateStaffUseCase,
)
from steno.application.usecase.invitation import (
    CreateInvitationRequest,
    CreateInvitationResponse,
    CreateInvitationUseCase,
    GetInvitationStatusRequest,
    GetInvitationStatusResponse,
    GetInvitationStatusUseCase,
    RevokeInvitationRequest,
    RevokeInvitationResponse,
    RevokeInvitationUseCase,
)
from steno.domain.error import AuthorizationError
from steno.domain.value import LetterId
from steno.interface.error import ErrorBody, error_response
from steno.util.jwt import JWTError

router = APIRouter(prefix="/letters", tags=["letters"], route_class=DishkaRoute)

ERROR_RESPONSES = {
    400: {"model": ErrorBody},
    401: {"model": ErrorBody},
    403: {"model": ErrorBody},
    404: {"model": ErrorBody},
    409: {"model": ErrorBody},
}


class CreateInvitationAPIRequest(BaseModel):
    """Invitation options; omitted values use the configured defaults."""

    expiration_days: int | None = None
    usage_limit: int | None = None


async def _authenticate(
    use_case: AuthenticateStaffUseCase,
    authorization: str | None,
    auth_token: str | None,
) -> AuthenticateStaffResponse:
    """Resolve the caller from a bearer header or the auth cookie.

    Raises:
        HTTPException: 401 without a valid session, 403 for non-staff roles
    """
    token = auth_token
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization[7:].strip()
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    try:
        return await use_case.execute(AuthenticateStaffRequest(token=token))
    except JWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        )
    except AuthorizationError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(e),
        )


@router.post(
    "/{letter_id}/invitation",
    response_model=CreateInvitationResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
async def create_invitation(
    letter_id: UUID,
    body: CreateInvitationAPIRequest,
    authenticate_staff_use_case: FromDishka[AuthenticateStaffUseCase],
    create_invitation_use_case: FromDishka[CreateInvitationUseCase],
    authorization: str | None = Header(default=None),
    auth_token: str | None = Cookie(default=None),
):
    """Issue an invitation link for a letter."""
    staff = await _authenticate(authenticate_staff_use_case, authorization, auth_token)

    response = await create_invitation_use_case.execute(
        CreateInvitationRequest(
            letter_id=LetterId(letter_id),
            organization_id=staff.organization_id,
            created_by=staff.user_id,
            expiration_days=body.expiration_days,
            usage_limit=body.usage_limit,
        )
    )
    if not response.success:
        return error_response(response.error_code, response.error_message)
    return response


@router.delete(
    "/{letter_id}/invitation",
    response_model=RevokeInvitationResponse,
    responses=ERROR_RESPONSES,
)
async def revoke_invitation(
    letter_id: UUID,
    authenticate_staff_use_case: FromDishka[AuthenticateStaffUseCase],
    revoke_invitation_use_case: FromDishka[RevokeInvitationUseCase],
    authorization: str | None = Header(default=None),
    auth_token: str | None = Cookie(default=None),
):
    """Revoke a letter's invitation."""
    staff = await _authenticate(authenticate_staff_use_case, authorization, auth_token)

    response = await revoke_invitation_use_case.execute(
        RevokeInvitationRequest(
            letter_id=LetterId(letter_id),
            organization_id=staff.organization_id,
            revoked_by=staff.user_id,
        )
    )
    if not response.success:
        return error_response(response.error_code, response.error_message)
    return response


@router.get(
    "/{letter_id}/invitation",
    response_model=GetInvitationStatusResponse,
    responses=ERROR_RESPONSES,
)
async def get_invitation_status(
    letter_id: UUID,
    authenticate_staff_use_case: FromDishka[AuthenticateStaffUseCase],
    get_invitation_status_use_case: FromDishka[GetInvitationStatusUseCase],
    authorization: str | None = Header(default=None),
    auth_token: str | None = Cookie(default=None),
):
    """Full invitation details for staff."""
    staff = await _authenticate(authenticate_staff_use_case, authorization, auth_token)

    response = await get_invitation_status_use_case.execute(
        GetInvitationStatusRequest(
            letter_id=LetterId(letter_id), organization_id=staff.organization_id
        )
    )
    if not response.found:
        return error_response(response.error_code, response.error_message)
    return response
