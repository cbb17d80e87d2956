"""
Domain entities for per-request validation outcomes and edge responses.
Standard library only.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from src.domain.entities.token import Scheme


class DenyReason(str, Enum):
    MISSING_HEADERS = "missing_headers"
    MALFORMED_TOKEN = "malformed_token"
    SIGNATURE_MISMATCH = "signature_mismatch"
    AUTHENTICATION_FAILED = "authentication_failed"
    MISSING_CLAIM = "missing_claim"
    STALE_TIMESTAMP = "stale_timestamp"
    PROVIDER_UNAVAILABLE = "provider_unavailable"


@dataclass(frozen=True)
class Allow:
    scheme: Scheme
    timestamp: int
    device: Optional[str] = None


@dataclass(frozen=True)
class Deny:
    scheme: Scheme
    reason: DenyReason


ValidationOutcome = Union[Allow, Deny]


@dataclass(frozen=True)
class Forward:
    """Pass the request through to the origin, adding these headers."""

    headers_to_add: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Reject:
    """Answer the request at the edge with a JSON error."""

    status: int
    body: dict[str, str]

    CONTENT_TYPE = "application/json"


EdgeResponse = Union[Forward, Reject]
