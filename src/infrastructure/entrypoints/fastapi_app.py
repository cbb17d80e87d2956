"""
FastAPI entry point: local development gateway.

Stands in for CloudFront during local runs: every request is authenticated
with the same AuthenticateRequestUseCase the Lambda@Edge handlers use, then
either rejected with the JSON error or proxied to EDGE_AUTH_ORIGIN_URL via
httpx. The secret provider may block on Secrets Manager, so it runs in the
threadpool and only the request that triggered a fetch waits on it.

Run locally:
    uvicorn --factory src.infrastructure.entrypoints.fastapi_app:create_app_from_env --reload --port 8000
"""

from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, Response
from starlette.concurrency import run_in_threadpool

from src.application.services.decision_builder import DecisionBuilder
from src.application.use_cases.authenticate_request import AuthenticateRequestUseCase
from src.domain.entities.decision import EdgeResponse, Reject
from src.infrastructure.config import Settings
from src.infrastructure.entrypoints.authenticator_factory import create_authenticator
from src.infrastructure.observability.logger import get_logger, setup_logging

logger = get_logger(__name__)

PROXY_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

# Hop-by-hop headers plus the ones httpx recomputes for the upstream request.
_EXCLUDED_REQUEST_HEADERS = {"host", "content-length", "connection", "keep-alive", "transfer-encoding"}
_EXCLUDED_RESPONSE_HEADERS = {"content-length", "content-encoding", "connection", "keep-alive", "transfer-encoding"}


def create_app(
    authenticator: AuthenticateRequestUseCase,
    origin_url: str,
    client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    """Build the gateway app.

    Args:
        authenticator: Use case enforcing one token scheme.
        origin_url:    Base URL that validated requests are proxied to.
        client:        httpx.AsyncClient override (tests inject a MockTransport).
    """
    origin = client or httpx.AsyncClient(base_url=origin_url, timeout=10.0)
    decision_builder = DecisionBuilder()

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        yield
        await origin.aclose()

    app = FastAPI(title="Edge Auth Gateway", lifespan=lifespan)

    async def authenticate(request: Request) -> EdgeResponse:
        """FastAPI dependency: validate the token headers on the incoming request."""
        outcome = await run_in_threadpool(authenticator.execute, dict(request.headers))
        return decision_builder.build(outcome)

    @app.get("/health")
    async def health():
        return {"status": "ok", "scheme": authenticator.scheme.value}

    @app.api_route("/{path:path}", methods=PROXY_METHODS)
    async def proxy(
        path: str,
        request: Request,
        decision: EdgeResponse = Depends(authenticate),
    ):
        """Reject at the edge, or forward the request to the origin."""
        if isinstance(decision, Reject):
            return JSONResponse(status_code=decision.status, content=decision.body)

        headers = {
            k: v for k, v in request.headers.items() if k.lower() not in _EXCLUDED_REQUEST_HEADERS
        }
        # Designated output names always win over client-supplied values.
        added = {k.lower() for k in decision.headers_to_add}
        headers = {k: v for k, v in headers.items() if k.lower() not in added}
        headers.update(decision.headers_to_add)

        try:
            upstream = await origin.request(
                request.method,
                f"/{path}",
                params=request.query_params.multi_items(),
                headers=headers,
                content=await request.body(),
            )
        except httpx.HTTPError as exc:
            logger.error("Origin request failed: %s", exc)
            return JSONResponse(status_code=502, content={"error": "Bad gateway"})

        return Response(
            content=upstream.content,
            status_code=upstream.status_code,
            headers={
                k: v
                for k, v in upstream.headers.items()
                if k.lower() not in _EXCLUDED_RESPONSE_HEADERS
            },
        )

    return app


def create_app_from_env() -> FastAPI:
    """Composition Root for local runs: settings from .env / environment."""
    settings = Settings()
    setup_logging(settings.log_level)
    scheme = settings.scheme
    logger.info("Gateway enforcing %s, forwarding to %s", scheme.value, settings.origin_url)
    return create_app(create_authenticator(scheme, settings), settings.origin_url)
