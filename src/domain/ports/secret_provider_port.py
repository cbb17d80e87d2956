"""
Port (interface) for secret providers.
Implementations own their caching policy; callers only ever see a Secret
borrowed for the duration of one validation.
"""

from abc import ABC, abstractmethod

from src.domain.entities.token import Scheme, Secret


class ISecretProvider(ABC):
    @abstractmethod
    def current(self, scheme: Scheme) -> Secret:
        """Return the secret currently in force for *scheme*.

        Must be safe to call from concurrent request evaluations.

        Raises:
            ProviderUnavailable: if the secret cannot be obtained.
        """
        ...
