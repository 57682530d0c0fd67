"""Interface layer error mapping.

Domain operations return typed results; this module turns a failed result
into an HTTP status and a JSON error body.
"""

from datetime import datetime

import logfire
from fastapi import Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from steno.domain.value import ErrorCode

GENERIC_ERROR_MESSAGE = "Something went wrong, please try again."

ERROR_STATUS: dict[ErrorCode, int] = {
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.NO_INVITATION: status.HTTP_404_NOT_FOUND,
    ErrorCode.CASE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVITATION_EXISTS: status.HTTP_409_CONFLICT,
    ErrorCode.ALREADY_REVOKED: status.HTTP_409_CONFLICT,
    ErrorCode.ALREADY_REGISTERED: status.HTTP_409_CONFLICT,
    ErrorCode.EMAIL_EXISTS: status.HTTP_409_CONFLICT,
    ErrorCode.INVALID_VERIFICATION_TOKEN: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.VERIFICATION_LOCKED: status.HTTP_423_LOCKED,
}


class ErrorBody(BaseModel):
    """JSON body of every error response."""

    code: str
    message: str
    attempts_remaining: int | None = None
    locked_until: datetime | None = None


def status_for(code: ErrorCode | None) -> int:
    if code is None:
        return status.HTTP_400_BAD_REQUEST
    return ERROR_STATUS.get(code, status.HTTP_400_BAD_REQUEST)


def error_response(
    code: ErrorCode | None,
    message: str | None,
    attempts_remaining: int | None = None,
    locked_until: datetime | None = None,
) -> JSONResponse:
    """Build the error response for a failed operation.

    Args:
        code: Error code from the result
        message: User-safe message from the result
        attempts_remaining: Verification attempts left, if relevant
        locked_until: Lockout expiry, if relevant

    Returns:
        JSON response with the mapped status code
    """
    body = ErrorBody(
        code=code.value if code else "BAD_REQUEST",
        message=message or GENERIC_ERROR_MESSAGE,
        attempts_remaining=attempts_remaining,
        locked_until=locked_until,
    )
    return JSONResponse(
        status_code=status_for(code),
        content=body.model_dump(mode="json", exclude_none=True),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Convert unexpected failures (store down, KMS down) into a generic 500."""
    logfire.exception(
        "Unhandled error",
        path=request.url.path,
        error_type=type(exc).__name__,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"code": "INTERNAL_ERROR", "message": GENERIC_ERROR_MESSAGE},
    )
