"""Key-management clients.

Data keys are generated per message and only ever stored wrapped under a
master key held by the key-management service.
"""

import base64
import binascii
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from steno.adapter.error import KeyManagementError

DATA_KEY_BYTES = 32
NONCE_BYTES = 12


class KeyUnwrapError(Exception):
    """A wrapped data key was not produced under this master key."""

    pass


@dataclass(frozen=True)
class DataKey:
    """A fresh data key and its wrapped (storable) form."""

    key_id: str
    plaintext: bytes
    wrapped: bytes


class KeyManagementClient(ABC):
    """Key-management service contract."""

    @abstractmethod
    async def generate_data_key(self) -> DataKey:
        """Generate a fresh 256-bit data key.

        Raises:
            KeyManagementError: If the service is unavailable
        """
        pass

    @abstractmethod
    async def decrypt_data_key(self, key_id: str, wrapped: bytes) -> bytes:
        """Unwrap a data key.

        Raises:
            KeyUnwrapError: If the wrapped key is not ours or was altered
            KeyManagementError: If the service is unavailable
        """
        pass


class LocalKeyManagementClient(KeyManagementClient):
    """Key management with a locally held AES-256 master key.

    Wrapped keys are ``nonce || AESGCM(master, data_key, aad=key_id)``.
    """

    def __init__(self, master_key: bytes, key_id: str) -> None:
        """Initialize local KMS.

        Args:
            master_key: 32-byte master key
            key_id: Identifier bound into every wrapped key
        """
        if len(master_key) != DATA_KEY_BYTES:
            raise KeyManagementError("Master key must be 32 bytes")
        self._master = AESGCM(master_key)
        self.key_id = key_id

    @classmethod
    def from_base64(cls, encoded: str, key_id: str) -> "LocalKeyManagementClient":
        try:
            master_key = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as e:
            raise KeyManagementError(f"Master key is not valid base64: {e}") from e
        return cls(master_key, key_id)

    async def generate_data_key(self) -> DataKey:
        plaintext = AESGCM.generate_key(bit_length=DATA_KEY_BYTES * 8)
        nonce = os.urandom(NONCE_BYTES)
        wrapped = nonce + self._master.encrypt(
            nonce, plaintext, self.key_id.encode("utf-8")
        )
        return DataKey(key_id=self.key_id, plaintext=plaintext, wrapped=wrapped)

    async def decrypt_data_key(self, key_id: str, wrapped: bytes) -> bytes:
        if key_id != self.key_id:
            raise KeyUnwrapError(f"Unknown key id: {key_id}")
        if len(wrapped) <= NONCE_BYTES:
            raise KeyUnwrapError("Wrapped key too short")
        nonce, sealed = wrapped[:NONCE_BYTES], wrapped[NONCE_BYTES:]
        try:
            return self._master.decrypt(nonce, sealed, key_id.encode("utf-8"))
        except InvalidTag as e:
            raise KeyUnwrapError("Wrapped key failed authentication") from e


class MockKeyManagementClient(LocalKeyManagementClient):
    """Local KMS with a random master key, for tests."""

    def __init__(self, key_id: str = "test-key") -> None:
        super().__init__(AESGCM.generate_key(bit_length=256), key_id)
