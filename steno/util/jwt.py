"""JWT token utilities.

Two token types share the signing secret and are told apart by ``typ``:
session tokens (bearer login) and verification grants (one registration).
"""

from datetime import datetime
from typing import Literal

import jwt
from pydantic import BaseModel, ValidationError

from steno.config import AuthSettings

SESSION_TOKEN_TYPE = "session"
VERIFICATION_GRANT_TYPE = "verification"


class SessionTokenPayload(BaseModel):
    """Bearer session token payload."""

    sub: str  # User ID
    email: str
    role: str
    organization_id: str
    session_id: str
    typ: Literal["session"]
    exp: datetime


class VerificationGrantPayload(BaseModel):
    """Verification grant payload, binding a proof of identity to one case."""

    case_id: str
    letter_id: str
    token_id: str
    jti: str
    typ: Literal["verification"]
    exp: datetime


class JWTError(Exception):
    """JWT-related error."""

    pass


def _encode(claims: dict, settings: AuthSettings) -> str:
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def _decode(token: str, settings: AuthSettings) -> dict:
    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise JWTError("Token has expired")
    except jwt.InvalidTokenError:
        raise JWTError("Invalid token")


def create_session_token(
    user_id: str,
    email: str,
    role: str,
    organization_id: str,
    session_id: str,
    expires_at: datetime,
    settings: AuthSettings,
) -> str:
    """Create a bearer session token.

    Args:
        user_id: User ID
        email: User email
        role: User role
        organization_id: Organization the user belongs to
        session_id: Backing session record ID
        expires_at: Absolute expiry
        settings: Authentication settings

    Returns:
        Encoded JWT token
    """
    payload = {
        "sub": user_id,
        "email": email,
        "role": role,
        "organization_id": organization_id,
        "session_id": session_id,
        "typ": SESSION_TOKEN_TYPE,
        "exp": expires_at,
    }
    return _encode(payload, settings)


def verify_session_token(token: str, settings: AuthSettings) -> SessionTokenPayload:
    """Verify and decode a session token.

    Args:
        token: JWT token to verify
        settings: Authentication settings

    Returns:
        Token payload if valid

    Raises:
        JWTError: If token is invalid, expired, or not a session token
    """
    claims = _decode(token, settings)
    try:
        return SessionTokenPayload(**claims)
    except ValidationError:
        raise JWTError("Invalid token")


def create_verification_grant(
    case_id: str,
    letter_id: str,
    token_id: str,
    jti: str,
    expires_at: datetime,
    settings: AuthSettings,
) -> str:
    """Create a short-lived verification grant.

    Args:
        case_id: Verified case
        letter_id: Letter carrying the invitation
        token_id: Invitation token ID the proof was made with
        jti: Unique grant ID (spent on registration)
        expires_at: Absolute expiry
        settings: Authentication settings

    Returns:
        Encoded JWT token
    """
    payload = {
        "case_id": case_id,
        "letter_id": letter_id,
        "token_id": token_id,
        "jti": jti,
        "typ": VERIFICATION_GRANT_TYPE,
        "exp": expires_at,
    }
    return _encode(payload, settings)


def verify_verification_grant(
    token: str, settings: AuthSettings
) -> VerificationGrantPayload:
    """Verify and decode a verification grant.

    Args:
        token: JWT token to verify
        settings: Authentication settings

    Returns:
        Grant payload if valid

    Raises:
        JWTError: If token is invalid, expired, or not a verification grant
    """
    claims = _decode(token, settings)
    try:
        return VerificationGrantPayload(**claims)
    except ValidationError:
        raise JWTError("Invalid token")
