"""
Use-case: decide whether one incoming request carries a valid token.
Depends only on Domain ports/entities and application services, no
infrastructure imports.

Flow: required headers → token codec → secret provider → proof validator →
replay guard. Every DecodeError, VerifyError and ProviderError is converted
into a Deny here, so callers always receive a ValidationOutcome.
"""

import logging
import time
from typing import Callable, Mapping, Optional

from src.application.services import replay_guard, token_codec
from src.application.services.proof_validator import ProofValidator
from src.domain.entities.decision import Allow, Deny, DenyReason, ValidationOutcome
from src.domain.entities.token import Scheme
from src.domain.errors import (
    AuthenticationFailed,
    DecodeError,
    MissingClaim,
    ProviderError,
    SignatureMismatch,
    StaleTimestamp,
    VerifyError,
)
from src.domain.ports.secret_provider_port import ISecretProvider

logger = logging.getLogger(__name__)

BOT_TOKEN_HEADER = "X-Bot-Token"
BOT_SIGNATURE_HEADER = "X-Bot-Signature"
AUTH_TOKEN_HEADER = "X-Auth-Token"

REQUIRED_HEADERS: dict[Scheme, tuple[str, ...]] = {
    Scheme.SIGNED_TIMESTAMP: (BOT_TOKEN_HEADER, BOT_SIGNATURE_HEADER),
    Scheme.ENCRYPTED_ENVELOPE: (AUTH_TOKEN_HEADER,),
}

_VERIFY_REASONS: dict[type, DenyReason] = {
    SignatureMismatch: DenyReason.SIGNATURE_MISMATCH,
    AuthenticationFailed: DenyReason.AUTHENTICATION_FAILED,
    MissingClaim: DenyReason.MISSING_CLAIM,
    StaleTimestamp: DenyReason.STALE_TIMESTAMP,
}


class AuthenticateRequestUseCase:
    def __init__(
        self,
        scheme: Scheme,
        provider: ISecretProvider,
        validator: ProofValidator,
        tolerance_seconds: int = replay_guard.DEFAULT_TOLERANCE_SECONDS,
        now: Callable[[], float] = time.time,
    ) -> None:
        """
        Args:
            scheme:            Token scheme this edge endpoint enforces.
            provider:          ISecretProvider implementation (static or cached remote).
            validator:         ProofValidator wired with an IAeadCipher.
            tolerance_seconds: Replay window half-width in seconds.
            now:               Wall clock returning Unix seconds; injectable for tests.
        """
        self.scheme = scheme
        self._provider = provider
        self._validator = validator
        self._tolerance = tolerance_seconds
        self._now = now

    def execute(self, headers: Mapping[str, str]) -> ValidationOutcome:
        """Evaluate the request *headers* (names matched case-insensitively)."""
        values = _lookup(headers, REQUIRED_HEADERS[self.scheme])
        if values is None:
            logger.warning("Denied (%s): missing required header(s)", self.scheme.value)
            return Deny(self.scheme, DenyReason.MISSING_HEADERS)

        try:
            parsed = token_codec.decode(values[0], self.scheme, *values[1:])
            secret = self._provider.current(self.scheme)
            claim = self._validator.verify(parsed, secret)
            replay_guard.check(claim.timestamp, int(self._now()), self._tolerance)
        except DecodeError as exc:
            logger.warning("Denied (%s): malformed token: %s", self.scheme.value, exc)
            return Deny(self.scheme, DenyReason.MALFORMED_TOKEN)
        except VerifyError as exc:
            reason = _VERIFY_REASONS.get(type(exc), DenyReason.AUTHENTICATION_FAILED)
            logger.warning("Denied (%s): %s: %s", self.scheme.value, reason.value, exc)
            return Deny(self.scheme, reason)
        except ProviderError as exc:
            logger.error("Secret provider unavailable (%s): %s", self.scheme.value, exc)
            return Deny(self.scheme, DenyReason.PROVIDER_UNAVAILABLE)

        logger.debug("Allowed (%s) timestamp=%s", self.scheme.value, claim.timestamp)
        return Allow(self.scheme, timestamp=claim.timestamp, device=claim.device)


def _lookup(headers: Mapping[str, str], names: tuple[str, ...]) -> Optional[list[str]]:
    lowered = {str(k).lower(): v for k, v in headers.items()}
    values = [lowered.get(name.lower()) for name in names]
    if any(not isinstance(v, str) or not v for v in values):
        return None
    return values
