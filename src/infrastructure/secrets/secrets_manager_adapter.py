"""
Infrastructure adapter: AWS Secrets Manager → ISecretStore.

The client is built with short connect/read timeouts and retries disabled:
a slow or failing fetch fails the request that triggered it, and the next
request retries naturally.
"""

import json
import os

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from src.domain.errors import ProviderUnavailable
from src.domain.ports.secret_store_port import ISecretStore
from src.infrastructure.observability.logger import get_logger

logger = get_logger(__name__)


class SecretsManagerAdapter(ISecretStore):
    """Fetches and deserializes JSON secrets from AWS Secrets Manager."""

    def __init__(
        self,
        region: str | None = None,
        timeout_seconds: float = 2.0,
        client=None,
    ) -> None:
        """
        Args:
            region:          Region holding the secret. Lambda@Edge runs in every
                             region, so this must point at the secret's home region.
            timeout_seconds: Connect and read timeout for each fetch.
            client:          Pre-built secretsmanager client (tests).
        """
        self._client = client or boto3.client(
            "secretsmanager",
            region_name=region or os.environ.get("AWS_DEFAULT_REGION", "us-east-1"),
            config=Config(
                connect_timeout=timeout_seconds,
                read_timeout=timeout_seconds,
                retries={"max_attempts": 1, "mode": "standard"},
            ),
        )

    def get_secret(self, secret_id: str) -> dict:
        """Fetch and deserialize a JSON secret by name or ARN."""
        try:
            response = self._client.get_secret_value(SecretId=secret_id)
        except (BotoCoreError, ClientError) as exc:
            logger.error("Failed to retrieve secret %s from Secrets Manager: %s", secret_id, exc)
            raise ProviderUnavailable(f"could not retrieve {secret_id}") from exc

        try:
            secret = json.loads(response["SecretString"])
        except (KeyError, TypeError, json.JSONDecodeError) as exc:
            raise ProviderUnavailable(f"{secret_id} has no JSON SecretString") from exc
        if not isinstance(secret, dict):
            raise ProviderUnavailable(f"{secret_id} is not a JSON object")
        return secret
