"""JWT token domain service."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import logfire

from steno.config import AuthSettings
from steno.domain.value import CaseId, LetterId, TokenId
from steno.util.jwt import (
    SessionTokenPayload,
    VerificationGrantPayload,
    create_session_token,
    create_verification_grant,
    verify_session_token,
    verify_verification_grant,
)

from .base import Service


class JWTService(Service):
    """Domain service for session tokens and verification grants."""

    def __init__(self, auth_settings: AuthSettings) -> None:
        """Initialize JWT service.

        Args:
            auth_settings: Authentication settings
        """
        self.auth_settings = auth_settings

    def session_expiry(self) -> datetime:
        """Expiry for a session issued now."""
        return datetime.now(timezone.utc) + timedelta(
            hours=self.auth_settings.session_expiry_hours
        )

    def create_session_token(
        self,
        user_id: str,
        email: str,
        role: str,
        organization_id: str,
        session_id: str,
        expires_at: datetime,
    ) -> str:
        """Create a bearer session token.

        Args:
            user_id: User ID
            email: User email
            role: User role
            organization_id: Organization ID
            session_id: Session record ID
            expires_at: Token expiry (matches the session record)

        Returns:
            JWT token string
        """
        with logfire.span("jwt_service.create_session_token", user_id=user_id):
            token = create_session_token(
                user_id,
                email,
                role,
                organization_id,
                session_id,
                expires_at,
                self.auth_settings,
            )
            logfire.info("Session token created", user_id=user_id, role=role)
            return token

    def verify_session_token(self, token: str) -> SessionTokenPayload:
        """Verify a session token and extract its payload.

        Raises:
            JWTError: If token is invalid or expired
        """
        with logfire.span("jwt_service.verify_session_token"):
            try:
                payload = verify_session_token(token, self.auth_settings)
                logfire.info("Session token verified", user_id=payload.sub)
                return payload
            except Exception as e:
                logfire.warn("Session token verification failed", error=str(e))
                raise

    def create_verification_grant(
        self, case_id: CaseId, letter_id: LetterId, token_id: TokenId
    ) -> str:
        """Mint a grant authorizing one registration for a verified case.

        Args:
            case_id: Verified case
            letter_id: Letter carrying the invitation
            token_id: Invitation token ID

        Returns:
            JWT token string
        """
        with logfire.span("jwt_service.create_verification_grant", case_id=str(case_id)):
            expires_at = datetime.now(timezone.utc) + timedelta(
                minutes=self.auth_settings.verification_grant_minutes
            )
            grant = create_verification_grant(
                str(case_id),
                str(letter_id),
                token_id,
                uuid4().hex,
                expires_at,
                self.auth_settings,
            )
            logfire.info("Verification grant created", case_id=str(case_id))
            return grant

    def verify_verification_grant(self, token: str) -> VerificationGrantPayload:
        """Verify a grant's signature, type and expiry.

        Raises:
            JWTError: If the grant is invalid or expired
        """
        with logfire.span("jwt_service.verify_verification_grant"):
            try:
                return verify_verification_grant(token, self.auth_settings)
            except Exception as e:
                logfire.warn("Verification grant rejected", error=str(e))
                raise
