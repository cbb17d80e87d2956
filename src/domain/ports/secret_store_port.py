"""
Port (interface) for remote secret stores.
Infrastructure adapters (e.g. SecretsManagerAdapter) must implement this interface.
"""

from abc import ABC, abstractmethod


class ISecretStore(ABC):
    @abstractmethod
    def get_secret(self, secret_id: str) -> dict:
        """Fetch and deserialize a JSON secret by name or ARN.

        Raises:
            ProviderUnavailable: if the store cannot be reached or the secret
                                 is not a JSON object.
        """
        ...
