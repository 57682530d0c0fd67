"""Envelope encryption over a key-management service.

Blob format (JSON)::

    {"v": 1, "kid": key_id, "key": b64(wrapped_key), "iv": b64(nonce), "ct": b64(ciphertext+tag)}
"""

import base64
import binascii
import os

import logfire
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from pydantic import BaseModel, ConfigDict, ValidationError

from steno.adapter.kms.client import KeyManagementClient, KeyUnwrapError
from steno.domain.error import EncryptionError
from steno.domain.service.crypto import Encryptor

BLOB_VERSION = 1
NONCE_BYTES = 12


class EncryptedBlob(BaseModel):
    """Serialized form of one envelope-encrypted message."""

    model_config = ConfigDict(frozen=True, strict=True)

    v: int
    kid: str
    key: str
    iv: str
    ct: str


def _b64(raw: bytes) -> str:
    return base64.b64encode(raw).decode("ascii")


def _unb64(text: str) -> bytes:
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise EncryptionError("Blob field is not valid base64") from e


class EnvelopeEncryptor(Encryptor):
    """AES-256-GCM envelope encryption with per-message data keys."""

    def __init__(self, kms: KeyManagementClient) -> None:
        """Initialize encryptor.

        Args:
            kms: Client that issues and unwraps data keys
        """
        self.kms = kms

    async def encrypt(self, plaintext: str) -> str:
        with logfire.span("envelope_encryptor.encrypt"):
            data_key = await self.kms.generate_data_key()
            nonce = os.urandom(NONCE_BYTES)
            ciphertext = AESGCM(data_key.plaintext).encrypt(
                nonce, plaintext.encode("utf-8"), None
            )
            blob = EncryptedBlob(
                v=BLOB_VERSION,
                kid=data_key.key_id,
                key=_b64(data_key.wrapped),
                iv=_b64(nonce),
                ct=_b64(ciphertext),
            )
            return blob.model_dump_json()

    async def decrypt(self, blob: str) -> str:
        try:
            envelope = EncryptedBlob.model_validate_json(blob)
        except ValidationError as e:
            raise EncryptionError("Blob is not a valid envelope") from e
        if envelope.v != BLOB_VERSION:
            raise EncryptionError(f"Unsupported blob version: {envelope.v!r}")

        wrapped = _unb64(envelope.key)
        nonce = _unb64(envelope.iv)
        ciphertext = _unb64(envelope.ct)
        if len(nonce) != NONCE_BYTES:
            raise EncryptionError("Invalid nonce length")

        try:
            data_key = await self.kms.decrypt_data_key(envelope.kid, wrapped)
        except KeyUnwrapError as e:
            raise EncryptionError("Data key could not be unwrapped") from e

        try:
            plaintext = AESGCM(data_key).decrypt(nonce, ciphertext, None)
        except (InvalidTag, ValueError) as e:
            raise EncryptionError("Ciphertext failed authentication") from e

        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as e:
            raise EncryptionError("Plaintext is not UTF-8") from e
