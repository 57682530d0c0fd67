"""Public invitation routes (no authentication).

The invitation token itself is the credential on these routes.
"""

import re

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from steno.application.usecase.debtor import (
    RegisterDebtorRequest,
    RegisterDebtorResponse,
    RegisterDebtorUseCase,
    VerifyIdentityRequest,
    VerifyIdentityResponse,
    VerifyIdentityUseCase,
)
from steno.application.usecase.invitation import (
    ValidateInvitationRequest,
    ValidateInvitationResponse,
    ValidateInvitationUseCase,
)
from steno.config import Settings
from steno.interface.error import ErrorBody, error_response

router = APIRouter(prefix="/invitations", tags=["invitations"], route_class=DishkaRoute)

ERROR_RESPONSES = {
    400: {"model": ErrorBody},
    401: {"model": ErrorBody},
    404: {"model": ErrorBody},
    409: {"model": ErrorBody},
    423: {"model": ErrorBody},
}


class VerifyIdentityAPIRequest(BaseModel):
    """Either SSN last four with date of birth, or an account number."""

    last_four_ssn: str | None = Field(default=None, pattern=r"^\d{4}$")
    date_of_birth: str | None = Field(default=None, pattern=r"^\d{4}-\d{2}-\d{2}$")
    account_number: str | None = Field(default=None, min_length=1, max_length=50)

    @model_validator(mode="after")
    def require_one_method(self) -> "VerifyIdentityAPIRequest":
        if not ((self.last_four_ssn and self.date_of_birth) or self.account_number):
            raise ValueError(
                "Provide the last four SSN digits with date of birth, "
                "or an account number"
            )
        return self


class RegisterDebtorAPIRequest(BaseModel):
    """Registration details."""

    verification_token: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=8, max_length=128)
    accepted_terms: bool

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        if not re.search(r"[A-Z]", v):
            raise ValueError("Password must contain an uppercase letter")
        if not re.search(r"[a-z]", v):
            raise ValueError("Password must contain a lowercase letter")
        if not re.search(r"\d", v):
            raise ValueError("Password must contain a digit")
        return v


def _client_ip(request: Request) -> str | None:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


@router.get(
    "/{token}/validate",
    response_model=ValidateInvitationResponse,
    responses=ERROR_RESPONSES,
)
async def validate_invitation(
    token: str,
    validate_invitation_use_case: FromDishka[ValidateInvitationUseCase],
):
    """Check an invitation link before asking for identity details.

    Returns only a masked case reference, never the debtor's identity.
    """
    response = await validate_invitation_use_case.execute(
        ValidateInvitationRequest(token=token)
    )
    if not response.valid:
        return error_response(response.error_code, response.error_message)
    return response


@router.post(
    "/{token}/verify",
    response_model=VerifyIdentityResponse,
    responses=ERROR_RESPONSES,
)
async def verify_identity(
    token: str,
    body: VerifyIdentityAPIRequest,
    request: Request,
    verify_identity_use_case: FromDishka[VerifyIdentityUseCase],
):
    """Verify the invitation holder's identity.

    Failures are counted per case; the lockout response carries the unlock time.
    """
    response = await verify_identity_use_case.execute(
        VerifyIdentityRequest(
            token=token,
            last_four_ssn=body.last_four_ssn,
            date_of_birth=body.date_of_birth,
            account_number=body.account_number,
            ip_address=_client_ip(request),
            user_agent=request.headers.get("user-agent"),
        )
    )
    if not response.verified:
        return error_response(
            response.error_code,
            response.error_message,
            attempts_remaining=response.attempts_remaining,
            locked_until=response.locked_until,
        )
    return response


@router.post(
    "/{token}/register",
    response_model=RegisterDebtorResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
async def register_debtor(
    token: str,
    body: RegisterDebtorAPIRequest,
    request: Request,
    register_debtor_use_case: FromDishka[RegisterDebtorUseCase],
    settings: FromDishka[Settings],
):
    """Create the debtor's account and sign them in.

    The session token is returned in the body and set as the ``auth_token``
    cookie.
    """
    response = await register_debtor_use_case.execute(
        RegisterDebtorRequest(
            token=token,
            verification_token=body.verification_token,
            email=str(body.email),
            password=body.password,
            accepted_terms=body.accepted_terms,
            ip_address=_client_ip(request),
            user_agent=request.headers.get("user-agent"),
        )
    )
    if not response.success:
        return error_response(response.error_code, response.error_message)

    is_production = settings.environment == "production"
    json_response = JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=response.model_dump(mode="json"),
    )
    json_response.set_cookie(
        key="auth_token",
        value=response.session_token or "",
        httponly=True,
        secure=is_production,
        samesite="lax",
        path="/",
        max_age=settings.auth.session_expiry_hours * 60 * 60,
    )
    return json_response
