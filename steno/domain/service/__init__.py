"""Domain services."""

from .base import Service
from .crypto import Encryptor, PasswordHasher
from .invitation_service import InvitationService
from .jwt_service import JWTService
from .registration_service import RegistrationService
from .token_codec import IssuedToken, TokenCodec
from .verification_service import VerificationService

__all__ = [
    "Encryptor",
    "InvitationService",
    "IssuedToken",
    "JWTService",
    "PasswordHasher",
    "RegistrationService",
    "Service",
    "TokenCodec",
    "VerificationService",
]
