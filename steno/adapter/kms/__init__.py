"""Envelope encryption and key management adapter."""

from .client import (
    DataKey,
    KeyManagementClient,
    KeyUnwrapError,
    LocalKeyManagementClient,
    MockKeyManagementClient,
)
from .encryptor import EnvelopeEncryptor

__all__ = [
    "DataKey",
    "EnvelopeEncryptor",
    "KeyManagementClient",
    "KeyUnwrapError",
    "LocalKeyManagementClient",
    "MockKeyManagementClient",
]
