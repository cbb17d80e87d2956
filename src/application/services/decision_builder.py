"""
Application service: turn a ValidationOutcome into an EdgeResponse.

Business decisions owned here:
  - Deny messages are generic per scheme; the failing check is never named.
  - Only the encrypted-envelope scheme annotates forwarded requests.
"""

from src.domain.entities.decision import (
    Allow,
    DenyReason,
    EdgeResponse,
    Forward,
    Reject,
    ValidationOutcome,
)
from src.domain.entities.token import Scheme

MISSING_HEADERS_MESSAGE = "Missing required header(s)"
CONFIGURATION_ERROR_MESSAGE = "Configuration error"

INVALID_TOKEN_MESSAGES: dict[Scheme, str] = {
    Scheme.SIGNED_TIMESTAMP: "Invalid or expired token",
    Scheme.ENCRYPTED_ENVELOPE: "Invalid or corrupted token",
}

VALIDATED_DEVICE_HEADER = "X-Validated-Device"
VALIDATED_TIMESTAMP_HEADER = "X-Validated-Timestamp"
UNKNOWN_DEVICE = "unknown"


class DecisionBuilder:
    def build(self, outcome: ValidationOutcome) -> EdgeResponse:
        if isinstance(outcome, Allow):
            return self._forward(outcome)

        if outcome.reason is DenyReason.MISSING_HEADERS:
            return Reject(status=403, body={"error": MISSING_HEADERS_MESSAGE})
        if outcome.reason is DenyReason.PROVIDER_UNAVAILABLE:
            return Reject(status=500, body={"error": CONFIGURATION_ERROR_MESSAGE})
        return Reject(status=403, body={"error": INVALID_TOKEN_MESSAGES[outcome.scheme]})

    @staticmethod
    def _forward(outcome: Allow) -> Forward:
        if outcome.scheme is not Scheme.ENCRYPTED_ENVELOPE:
            return Forward()
        return Forward(
            headers_to_add={
                VALIDATED_DEVICE_HEADER: outcome.device or UNKNOWN_DEVICE,
                VALIDATED_TIMESTAMP_HEADER: str(outcome.timestamp),
            }
        )
