"""Key-management infrastructure providers."""

from dishka import Scope, provide

from steno.adapter.kms import KeyManagementClient, LocalKeyManagementClient
from steno.config import Settings
from steno.util.di.base import ProviderBase
from steno.util.error import ConfigurationError


class KMSProvider(ProviderBase):
    """KMS component base."""

    __mock_component__ = "kms"


class ProdKMSProvider(KMSProvider):
    """Production KMS provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_kms_client(self, settings: Settings) -> KeyManagementClient:
        """Provide key-management client.

        Returns:
            KMS client wrapping data keys under the configured master key

        Raises:
            ConfigurationError: If no master key is configured
        """
        if not settings.encryption.master_key:
            raise ConfigurationError(
                "ENCRYPTION__MASTER_KEY must be configured",
                setting="encryption.master_key",
            )

        return LocalKeyManagementClient.from_base64(
            settings.encryption.master_key, settings.encryption.key_id
        )
