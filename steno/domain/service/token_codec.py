"""Invitation token codec.

Token structure::

    base64url(json({"id": token_id, "data": encrypt(json(payload))}))

The ``id`` is a non-secret, high-entropy lookup key. The payload inside
``data`` repeats the token id, so an envelope spliced onto another
invitation's ciphertext fails the cross-check when opened.
"""

import base64
import binascii
import hmac
import secrets
from dataclasses import dataclass

import logfire
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from steno.domain.error import EncryptionError
from steno.domain.model.invitation import InvitationClaims, InvitationPayload
from steno.domain.service.crypto import Encryptor
from steno.domain.value import InvitationToken, TokenId

from .base import Service

# 32 random bytes = 256 bits of entropy
TOKEN_ID_BYTES = 32


@dataclass(frozen=True)
class IssuedToken:
    """A freshly minted invitation token."""

    token: InvitationToken
    token_id: TokenId
    ciphertext: str  # Encrypted payload, persisted alongside the token


class TokenEnvelope(BaseModel):
    """Outer, unencrypted layer of an invitation token."""

    model_config = ConfigDict(frozen=True, strict=True)

    id: str = Field(min_length=1)
    data: str = Field(min_length=1)


def generate_token_id() -> TokenId:
    """Generate a random token ID, independent of any payload."""
    return TokenId(secrets.token_urlsafe(TOKEN_ID_BYTES))


def _b64url_encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _b64url_decode(text: str) -> bytes:
    padding = "=" * (-len(text) % 4)
    return base64.urlsafe_b64decode(text + padding)


def _decode_envelope(token: str) -> TokenEnvelope | None:
    """Split a token into its id and data without decrypting."""
    try:
        raw = _b64url_decode(token)
    except (binascii.Error, ValueError):
        return None

    try:
        return TokenEnvelope.model_validate_json(raw)
    except ValidationError:
        return None


class TokenCodec(Service):
    """Builds and opens invitation tokens.

    Callers only ever learn "valid payload" or None: the reason a token was
    rejected is logged at debug level and never returned.
    """

    def __init__(self, encryptor: Encryptor) -> None:
        """Initialize token codec.

        Args:
            encryptor: Authenticated encryption primitive
        """
        self.encryptor = encryptor

    async def issue_token(self, claims: InvitationClaims) -> IssuedToken:
        """Mint a token for the given claims.

        Args:
            claims: Payload fields without a token ID

        Returns:
            The token, its ID, and the encrypted payload
        """
        token_id = generate_token_id()
        payload = InvitationPayload(**claims.model_dump(), token_id=token_id)

        ciphertext = await self.encryptor.encrypt(payload.model_dump_json())
        envelope = TokenEnvelope(id=token_id, data=ciphertext)
        token = _b64url_encode(envelope.model_dump_json().encode("utf-8"))

        return IssuedToken(
            token=InvitationToken(token), token_id=token_id, ciphertext=ciphertext
        )

    def parse_token_id(self, token: str) -> TokenId | None:
        """Extract the token ID from the outer envelope only.

        Args:
            token: Token as presented by the caller

        Returns:
            The token ID, or None for any malformed input
        """
        envelope = _decode_envelope(token)
        if envelope is None:
            return None
        return TokenId(envelope.id)

    async def open_token(self, token: str) -> InvitationPayload | None:
        """Decrypt a token and verify its payload matches its envelope.

        Args:
            token: Token as presented by the caller

        Returns:
            The payload, or None if the token is malformed, tampered with,
            of an unknown payload version, or spliced
        """
        envelope = _decode_envelope(token)
        if envelope is None:
            return None
        envelope_id, data = envelope.id, envelope.data

        try:
            plaintext = await self.encryptor.decrypt(data)
        except EncryptionError as e:
            logfire.debug("Invitation token decryption failed", error=str(e))
            return None

        try:
            payload = InvitationPayload.model_validate_json(plaintext)
        except ValidationError:
            logfire.debug("Invitation payload schema mismatch")
            return None

        if not hmac.compare_digest(
            payload.token_id.encode("utf-8"), envelope_id.encode("utf-8")
        ):
            logfire.warn(
                "Invitation token id mismatch", token_id=envelope_id[:8] + "..."
            )
            return None

        return payload
