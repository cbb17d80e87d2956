"""
Lambda@Edge entry points for cloud deployment (CloudFront viewer-request).

Two handlers, one per token scheme, attached to separate cache behaviors:
    hmac_handler    X-Bot-Token + X-Bot-Signature (HMAC-SHA256)
    aesgcm_handler  X-Auth-Token (AES-256-GCM envelope)

Each returns either the (possibly annotated) request, which CloudFront
forwards to the origin, or a generated JSON error response. The pipeline is
wired lazily on first invocation and reused for the container's lifetime, so
the secret cache survives across requests on the same instance.

Deploy: package src/ with its dependencies and set the function handler to
    src.infrastructure.entrypoints.lambda_edge_handler.hmac_handler
or
    src.infrastructure.entrypoints.lambda_edge_handler.aesgcm_handler
"""

import json
from functools import lru_cache
from http import HTTPStatus

from src.application.services.decision_builder import CONFIGURATION_ERROR_MESSAGE, DecisionBuilder
from src.application.use_cases.authenticate_request import AuthenticateRequestUseCase
from src.domain.entities.decision import EdgeResponse, Forward, Reject
from src.domain.entities.token import Scheme
from src.infrastructure.config import get_settings
from src.infrastructure.entrypoints.authenticator_factory import create_authenticator
from src.infrastructure.observability.logger import get_logger, setup_logging

logger = get_logger(__name__)

_decision_builder = DecisionBuilder()
_CONFIGURATION_ERROR = Reject(status=500, body={"error": CONFIGURATION_ERROR_MESSAGE})


@lru_cache(maxsize=None)
def _authenticator(scheme: Scheme) -> AuthenticateRequestUseCase:
    settings = get_settings()
    setup_logging(settings.log_level)
    return create_authenticator(scheme, settings)


def hmac_handler(event: dict, context=None) -> dict:
    """Viewer-request handler for the signed-timestamp scheme."""
    return _handle_scheme(event, Scheme.SIGNED_TIMESTAMP)


def aesgcm_handler(event: dict, context=None) -> dict:
    """Viewer-request handler for the encrypted-envelope scheme."""
    return _handle_scheme(event, Scheme.ENCRYPTED_ENVELOPE)


def _handle_scheme(event: dict, scheme: Scheme) -> dict:
    try:
        authenticator = _authenticator(scheme)
    except Exception:
        logger.exception("Failed to wire the %s authenticator", scheme.value)
        return _error_response(_CONFIGURATION_ERROR)
    return handle(event, authenticator)


def handle(event: dict, authenticator: AuthenticateRequestUseCase) -> dict:
    """Authenticate the CloudFront request in *event* and render the result."""
    try:
        request = event["Records"][0]["cf"]["request"]
        outcome = authenticator.execute(_flatten_headers(request.get("headers", {})))
        return render(request, _decision_builder.build(outcome))
    except Exception:
        # Malformed event or wiring bug; the use case itself never raises.
        logger.exception("Unhandled error while authenticating request")
        return _error_response(_CONFIGURATION_ERROR)


def render(request: dict, response: EdgeResponse) -> dict:
    """Translate an EdgeResponse into the Lambda@Edge return value."""
    if isinstance(response, Forward):
        headers = request.setdefault("headers", {})
        for name, value in response.headers_to_add.items():
            headers[name.lower()] = [{"key": name, "value": value}]
        return request
    return _error_response(response)


def _error_response(reject: Reject) -> dict:
    return {
        "status": str(reject.status),
        "statusDescription": HTTPStatus(reject.status).phrase,
        "headers": {
            "content-type": [{"key": "Content-Type", "value": Reject.CONTENT_TYPE}],
        },
        "body": json.dumps(reject.body),
    }


def _flatten_headers(cf_headers: dict) -> dict[str, str]:
    """CloudFront headers are {lowercase-name: [{"key": ..., "value": ...}, ...]}."""
    flat: dict[str, str] = {}
    for name, entries in cf_headers.items():
        if entries and isinstance(entries, list) and isinstance(entries[0], dict):
            value = entries[0].get("value")
            if isinstance(value, str):
                flat[name.lower()] = value
    return flat
