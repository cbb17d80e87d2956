import httpx
import pytest
from fastapi.testclient import TestClient

from src.application.services.secret_providers import CachedSecretProvider, StaticSecretProvider
from src.application.use_cases.authenticate_request import AuthenticateRequestUseCase
from src.domain.entities.token import Scheme
from src.infrastructure.entrypoints.fastapi_app import create_app
from tests.fixtures import AES_KEY, HMAC_SECRET, NOW, FakeSecretStore

ORIGIN = "http://origin.test"


class RecordingOrigin:
    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(200, json={"path": request.url.path}, headers={"X-Origin": "yes"})


@pytest.fixture
def origin() -> RecordingOrigin:
    return RecordingOrigin()


def _client(authenticator: AuthenticateRequestUseCase, origin: RecordingOrigin) -> TestClient:
    upstream = httpx.AsyncClient(base_url=ORIGIN, transport=httpx.MockTransport(origin))
    return TestClient(create_app(authenticator, ORIGIN, client=upstream))


@pytest.fixture
def hmac_client(validator, origin) -> TestClient:
    authenticator = AuthenticateRequestUseCase(
        Scheme.SIGNED_TIMESTAMP, StaticSecretProvider(HMAC_SECRET), validator, now=lambda: NOW
    )
    return _client(authenticator, origin)


@pytest.fixture
def aes_client(validator, origin) -> TestClient:
    authenticator = AuthenticateRequestUseCase(
        Scheme.ENCRYPTED_ENVELOPE,
        CachedSecretProvider(FakeSecretStore(), "edge/aes"),
        validator,
        now=lambda: NOW,
    )
    return _client(authenticator, origin)


def test_health_skips_authentication(hmac_client, origin) -> None:
    response = hmac_client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "scheme": "signed_timestamp"}
    assert origin.requests == []


def test_valid_hmac_request_is_proxied(hmac_client, origin, issuer) -> None:
    token, signature = issuer.sign_timestamp(HMAC_SECRET, NOW)
    response = hmac_client.get(
        "/lambda-edge/test.html", headers={"X-Bot-Token": token, "X-Bot-Signature": signature}
    )

    assert response.status_code == 200
    assert response.json() == {"path": "/lambda-edge/test.html"}
    assert response.headers["x-origin"] == "yes"
    assert origin.requests[0].headers["x-bot-token"] == token


def test_missing_headers_rejected_without_proxying(hmac_client, origin) -> None:
    response = hmac_client.get("/lambda-edge/test.html")
    assert response.status_code == 403
    assert response.json() == {"error": "Missing required header(s)"}
    assert response.headers["content-type"] == "application/json"
    assert origin.requests == []


def test_invalid_signature_rejected(hmac_client, origin) -> None:
    response = hmac_client.get(
        "/lambda-edge/test.html",
        headers={"X-Bot-Token": "1737312000", "X-Bot-Signature": "invalid-signature-12345"},
    )
    assert response.status_code == 403
    assert response.json() == {"error": "Invalid or expired token"}
    assert origin.requests == []


def test_envelope_request_forwards_validated_headers(aes_client, origin, issuer) -> None:
    raw = issuer.seal_envelope(AES_KEY, ts=NOW, device="d1", data="x")
    response = aes_client.post(
        "/api/items?limit=5",
        headers={"X-Auth-Token": raw, "X-Validated-Device": "spoofed"},
        content=b"payload",
    )

    assert response.status_code == 200
    forwarded = origin.requests[0]
    assert forwarded.method == "POST"
    assert forwarded.url.params["limit"] == "5"
    assert forwarded.content == b"payload"
    assert forwarded.headers["x-validated-device"] == "d1"
    assert forwarded.headers["x-validated-timestamp"] == str(NOW)


def test_secret_outage_is_500(validator, origin, issuer) -> None:
    authenticator = AuthenticateRequestUseCase(
        Scheme.ENCRYPTED_ENVELOPE,
        CachedSecretProvider(FakeSecretStore(error=RuntimeError("throttled")), "edge/aes"),
        validator,
        now=lambda: NOW,
    )
    response = _client(authenticator, origin).get(
        "/", headers={"X-Auth-Token": issuer.seal_envelope(AES_KEY, ts=NOW)}
    )
    assert response.status_code == 500
    assert response.json() == {"error": "Configuration error"}


def test_origin_failure_is_502(validator, issuer) -> None:
    def unreachable(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    authenticator = AuthenticateRequestUseCase(
        Scheme.SIGNED_TIMESTAMP, StaticSecretProvider(HMAC_SECRET), validator, now=lambda: NOW
    )
    upstream = httpx.AsyncClient(base_url=ORIGIN, transport=httpx.MockTransport(unreachable))
    client = TestClient(create_app(authenticator, ORIGIN, client=upstream))
    token, signature = issuer.sign_timestamp(HMAC_SECRET, NOW)

    response = client.get("/", headers={"X-Bot-Token": token, "X-Bot-Signature": signature})

    assert response.status_code == 502
