"""
Composition Root helpers shared by the Lambda@Edge and FastAPI entrypoints.

Binds each Scheme to a secret provider, the AES-GCM cipher and the
AuthenticateRequestUseCase. Scheme 1 uses the static shared key unless a
Secrets Manager id is configured for it; scheme 2 always reads its key from
Secrets Manager.
"""

from typing import Optional

from src.application.services.proof_validator import ProofValidator
from src.application.services.secret_providers import CachedSecretProvider, StaticSecretProvider
from src.application.use_cases.authenticate_request import AuthenticateRequestUseCase
from src.domain.entities.token import Scheme
from src.domain.ports.secret_provider_port import ISecretProvider
from src.domain.ports.secret_store_port import ISecretStore
from src.infrastructure.config import Settings
from src.infrastructure.crypto.aesgcm_cipher import AesGcmCipher
from src.infrastructure.secrets.secrets_manager_adapter import SecretsManagerAdapter


def create_secret_provider(
    scheme: Scheme,
    settings: Settings,
    store: Optional[ISecretStore] = None,
) -> ISecretProvider:
    """Build the secret provider for *scheme*.

    Args:
        scheme:   Token scheme the provider serves.
        settings: Runtime settings (secret ids, TTL, region, timeout).
        store:    ISecretStore override; defaults to a SecretsManagerAdapter.

    Raises:
        ValueError: if the encrypted-envelope scheme has no AES secret id.
    """
    if scheme is Scheme.SIGNED_TIMESTAMP:
        if not settings.hmac_secret_id:
            return StaticSecretProvider(settings.hmac_secret)
        secret_id = settings.hmac_secret_id
    else:
        # The AES key must be 32 random bytes; never fall back to the passphrase.
        if not settings.aes_secret_id:
            raise ValueError("aes_secret_id is required for the encrypted-envelope scheme")
        secret_id = settings.aes_secret_id

    store = store or SecretsManagerAdapter(
        region=settings.secrets_region,
        timeout_seconds=settings.fetch_timeout,
    )
    return CachedSecretProvider(
        store,
        secret_id,
        ttl_seconds=settings.secret_cache_ttl,
    )


def create_authenticator(
    scheme: Scheme,
    settings: Settings,
    provider: Optional[ISecretProvider] = None,
) -> AuthenticateRequestUseCase:
    """Wire the full validation pipeline for *scheme*."""
    return AuthenticateRequestUseCase(
        scheme=scheme,
        provider=provider or create_secret_provider(scheme, settings),
        validator=ProofValidator(AesGcmCipher()),
        tolerance_seconds=settings.timestamp_tolerance,
    )
