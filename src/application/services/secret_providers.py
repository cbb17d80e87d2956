"""
Application service: secret providers implementing ISecretProvider.

StaticSecretProvider serves a fixed key. CachedSecretProvider fetches a JSON
secret from an injected ISecretStore and keeps it per scheme for a TTL.

Cache entries are immutable Secret objects swapped in with one reference
assignment, so a concurrent reader sees either the old pair or the new one,
never a mix. Concurrent misses each fetch; there is no request coalescing.
"""

import binascii
import logging
import time
from typing import Callable, Optional

from src.domain.entities.token import Scheme, Secret
from src.domain.errors import ProviderUnavailable
from src.domain.ports.cipher_port import IAeadCipher
from src.domain.ports.secret_provider_port import ISecretProvider
from src.domain.ports.secret_store_port import ISecretStore

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300.0

SECRET_FIELDS: dict[Scheme, str] = {
    Scheme.SIGNED_TIMESTAMP: "secretKey",
    Scheme.ENCRYPTED_ENVELOPE: "aesKey",
}


class StaticSecretProvider(ISecretProvider):
    """Serves one pre-configured key for every scheme. Never fails, never expires."""

    def __init__(self, value: bytes | str) -> None:
        if isinstance(value, str):
            value = value.encode("utf-8")
        self._secret = Secret(value=value)

    def current(self, scheme: Scheme) -> Secret:
        return self._secret


class CachedSecretProvider(ISecretProvider):
    """Fetches secret material from a remote store and caches it for ttl_seconds."""

    def __init__(
        self,
        store: ISecretStore,
        secret_id: str,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Args:
            store:       ISecretStore implementation (e.g. SecretsManagerAdapter).
            secret_id:   Name or ARN of the JSON secret holding secretKey / aesKey.
            ttl_seconds: How long a fetched secret is served without re-fetching.
            clock:       Monotonic clock in seconds; injectable for tests.
        """
        self._store = store
        self._secret_id = secret_id
        self._ttl = ttl_seconds
        self._clock = clock
        self._cache: dict[Scheme, Secret] = {}

    def current(self, scheme: Scheme) -> Secret:
        now = self._clock()
        cached = self._cache.get(scheme)
        if cached is not None and cached.is_fresh(now):
            return cached

        logger.info("Secret cache miss for %s; fetching %s", scheme.value, self._secret_id)
        try:
            record = self._store.get_secret(self._secret_id)
        except ProviderUnavailable:
            raise
        except Exception as exc:
            raise ProviderUnavailable(f"fetching {self._secret_id} failed: {exc}") from exc
        secret = Secret(value=_extract_key(record, scheme), expires_at=now + self._ttl)
        self._cache[scheme] = secret
        return secret

    def invalidate(self, scheme: Optional[Scheme] = None) -> None:
        """Drop cached material so the next call fetches again."""
        if scheme is None:
            self._cache = {}
        else:
            self._cache.pop(scheme, None)


def _extract_key(record: dict, scheme: Scheme) -> bytes:
    field = SECRET_FIELDS[scheme]
    value = record.get(field) if isinstance(record, dict) else None
    if not isinstance(value, str) or not value:
        raise ProviderUnavailable(f"secret has no string field {field!r}")

    if scheme is Scheme.SIGNED_TIMESTAMP:
        return value.encode("utf-8")

    try:
        key = binascii.unhexlify(value)
    except (binascii.Error, ValueError) as exc:
        raise ProviderUnavailable(f"{field} is not valid hex") from exc
    if len(key) != IAeadCipher.KEY_SIZE:
        raise ProviderUnavailable(
            f"{field} must decode to {IAeadCipher.KEY_SIZE} bytes, got {len(key)}"
        )
    return key
