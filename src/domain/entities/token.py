"""
Domain entities for the two token schemes and the secrets that verify them.
Standard library only.

A ParsedToken is only ever built by the token codec once every length and
encoding constraint holds; malformed input raises a DecodeError instead.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class Scheme(str, Enum):
    SIGNED_TIMESTAMP = "signed_timestamp"
    ENCRYPTED_ENVELOPE = "encrypted_envelope"


@dataclass(frozen=True)
class SignedTimestamp:
    timestamp: str
    signature: bytes


@dataclass(frozen=True)
class EncryptedEnvelope:
    nonce: bytes
    ciphertext: bytes
    tag: bytes


ParsedToken = Union[SignedTimestamp, EncryptedEnvelope]


@dataclass(frozen=True, repr=False)
class Secret:
    """Key material plus the monotonic instant it stops being served from cache.

    expires_at is None for secrets that never expire (static keys).
    """

    value: bytes
    expires_at: Optional[float] = None

    def is_fresh(self, now: float) -> bool:
        return self.expires_at is None or now < self.expires_at

    def __repr__(self) -> str:
        return f"Secret(value=<{len(self.value)} bytes>, expires_at={self.expires_at!r})"


@dataclass(frozen=True)
class DecryptedPayload:
    ts: int
    device: Optional[str] = None
    data: Optional[str] = None


@dataclass(frozen=True)
class VerifiedClaim:
    """Proof checked, timestamp not yet window-checked."""

    timestamp: int
    device: Optional[str] = None
    data: Optional[str] = None
