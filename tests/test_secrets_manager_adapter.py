import json
from unittest.mock import Mock, patch

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from src.domain.errors import ProviderUnavailable
from src.infrastructure.secrets.secrets_manager_adapter import SecretsManagerAdapter
from tests.fixtures import AES_KEY_HEX


def _client(**kwargs) -> Mock:
    client = Mock()
    client.get_secret_value.configure_mock(**kwargs)
    return client


def test_get_secret_parses_json_secret_string() -> None:
    client = _client(return_value={"SecretString": json.dumps({"aesKey": AES_KEY_HEX})})
    adapter = SecretsManagerAdapter(client=client)

    assert adapter.get_secret("edge/aes") == {"aesKey": AES_KEY_HEX}
    client.get_secret_value.assert_called_once_with(SecretId="edge/aes")


def test_client_error_is_provider_unavailable() -> None:
    error = ClientError({"Error": {"Code": "ResourceNotFoundException"}}, "GetSecretValue")
    adapter = SecretsManagerAdapter(client=_client(side_effect=error))
    with pytest.raises(ProviderUnavailable):
        adapter.get_secret("edge/aes")


def test_connection_error_is_provider_unavailable() -> None:
    error = EndpointConnectionError(endpoint_url="https://secretsmanager.us-east-1.amazonaws.com")
    adapter = SecretsManagerAdapter(client=_client(side_effect=error))
    with pytest.raises(ProviderUnavailable):
        adapter.get_secret("edge/aes")


@pytest.mark.parametrize(
    "response",
    [{"SecretBinary": b"\x00"}, {"SecretString": "not json"}, {"SecretString": "[1, 2]"}],
)
def test_non_json_object_secret_is_provider_unavailable(response: dict) -> None:
    adapter = SecretsManagerAdapter(client=_client(return_value=response))
    with pytest.raises(ProviderUnavailable):
        adapter.get_secret("edge/aes")


def test_default_client_is_timeout_bounded_without_retries() -> None:
    with patch("src.infrastructure.secrets.secrets_manager_adapter.boto3.client") as factory:
        SecretsManagerAdapter(region="us-east-1", timeout_seconds=1.5)

    args, kwargs = factory.call_args
    assert args == ("secretsmanager",)
    assert kwargs["region_name"] == "us-east-1"
    config = kwargs["config"]
    assert config.connect_timeout == 1.5
    assert config.read_timeout == 1.5
    assert config.retries["max_attempts"] == 1
