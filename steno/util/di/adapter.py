"""Adapter DI providers (non-mockable)."""

from dishka import Scope, provide

from steno.adapter.kms import EnvelopeEncryptor, KeyManagementClient
from steno.adapter.password import BcryptPasswordHasher
from steno.config import AuthSettings
from steno.domain.service import Encryptor, PasswordHasher
from steno.util.di.base import ProviderBase


class ProdAdapterProvider(ProviderBase):
    """Cryptographic primitives consumed by the domain."""

    scope = Scope.APP

    @provide
    def get_encryptor(self, kms: KeyManagementClient) -> Encryptor:
        """Provide envelope encryption over the configured KMS."""
        return EnvelopeEncryptor(kms)

    @provide
    def get_password_hasher(self, auth_settings: AuthSettings) -> PasswordHasher:
        """Provide bcrypt password hasher."""
        return BcryptPasswordHasher(rounds=auth_settings.bcrypt_rounds)
