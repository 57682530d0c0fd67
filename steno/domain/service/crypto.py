"""Cryptographic primitives consumed by the domain.

Implementations live in the adapter layer.
"""


class Encryptor:
    """Authenticated encryption backed by a key-management service."""

    async def encrypt(self, plaintext: str) -> str:
        """Encrypt plaintext.

        Args:
            plaintext: UTF-8 text to seal

        Returns:
            Opaque ciphertext blob (text-safe)

        Raises:
            EncryptionError: If the KMS or cipher fails
        """
        raise NotImplementedError

    async def decrypt(self, blob: str) -> str:
        """Decrypt and authenticate a blob produced by ``encrypt``.

        Args:
            blob: Ciphertext blob

        Returns:
            The original plaintext

        Raises:
            EncryptionError: If the blob is malformed, tampered with, or the
                KMS cannot unwrap its key
        """
        raise NotImplementedError


class PasswordHasher:
    """Slow, salted hashing for passwords and secret-equivalent fragments."""

    async def hash(self, secret: str) -> str:
        """Hash a secret.

        Args:
            secret: The secret to hash

        Returns:
            Encoded hash including salt and cost
        """
        raise NotImplementedError

    async def verify(self, secret: str, hashed: str) -> bool:
        """Check a secret against a stored hash.

        Args:
            secret: Candidate secret
            hashed: Stored hash

        Returns:
            True if they match
        """
        raise NotImplementedError
