"""Infrastructure providers."""

# Import bases
from .kms import KMSProvider
from .persistence import PersistenceProvider

# Import implementations (needed for __subclasses__())
from .kms import ProdKMSProvider  # noqa: F401
from .persistence import ProdPersistenceProvider  # noqa: F401

__all__ = [
    "KMSProvider",
    "PersistenceProvider",
    "ProdKMSProvider",
    "ProdPersistenceProvider",
]
