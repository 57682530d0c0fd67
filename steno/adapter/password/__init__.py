"""Password hashing adapter."""

from .bcrypt_hasher import BcryptPasswordHasher

__all__ = ["BcryptPasswordHasher"]
