"""Mock providers for testing."""

from .kms import MockKMSProvider
from .persistence import MockPersistenceProvider
from .container import build_test_container

__all__ = [
    "MockKMSProvider",
    "MockPersistenceProvider",
    "build_test_container",
]
