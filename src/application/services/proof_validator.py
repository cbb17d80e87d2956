"""
Application service: scheme-specific proof checks.

Business decisions owned here:
  - Scheme 1: HMAC-SHA256 over the timestamp string, compared in constant time.
  - Scheme 2: AEAD decryption, then a JSON payload carrying an integer "ts".

The AEAD cipher is injected (IAeadCipher); the service performs no I/O and
never talks to a secret provider; it receives an already-resolved Secret.
"""

import hashlib
import hmac
import json

from src.domain.entities.token import (
    DecryptedPayload,
    EncryptedEnvelope,
    ParsedToken,
    Secret,
    SignedTimestamp,
    VerifiedClaim,
)
from src.domain.errors import MissingClaim, SignatureMismatch
from src.domain.ports.cipher_port import IAeadCipher


class ProofValidator:
    def __init__(self, cipher: IAeadCipher) -> None:
        self._cipher = cipher

    def verify(self, parsed: ParsedToken, secret: Secret) -> VerifiedClaim:
        """Check the proof carried by *parsed* against *secret*.

        Raises:
            SignatureMismatch:    HMAC does not match (scheme 1).
            AuthenticationFailed: AEAD decryption failed (scheme 2).
            MissingClaim:         decrypted payload has no integer "ts" (scheme 2).
        """
        if isinstance(parsed, SignedTimestamp):
            return self._verify_signature(parsed, secret)
        if isinstance(parsed, EncryptedEnvelope):
            payload = self._open_envelope(parsed, secret)
            return VerifiedClaim(timestamp=payload.ts, device=payload.device, data=payload.data)
        raise TypeError(f"unsupported token type: {type(parsed).__name__}")

    @staticmethod
    def _verify_signature(token: SignedTimestamp, secret: Secret) -> VerifiedClaim:
        expected = hmac.new(secret.value, token.timestamp.encode("ascii"), hashlib.sha256).digest()
        # Length is not secret-dependent, so failing fast on it leaks nothing.
        if len(token.signature) != len(expected):
            raise SignatureMismatch("signature length differs")
        if not hmac.compare_digest(token.signature, expected):
            raise SignatureMismatch("signature does not match")
        return VerifiedClaim(timestamp=int(token.timestamp))

    def _open_envelope(self, envelope: EncryptedEnvelope, secret: Secret) -> DecryptedPayload:
        plaintext = self._cipher.decrypt(secret.value, envelope.nonce, envelope.ciphertext, envelope.tag)
        return parse_payload(plaintext)


def parse_payload(plaintext: bytes) -> DecryptedPayload:
    """Parse decrypted bytes into a DecryptedPayload.

    Expected shape: {"ts": <int>, "device": "<str>", "data": "<str>"}; only ts
    is mandatory. Non-string device/data values are dropped.

    Raises:
        MissingClaim: if the plaintext is not a JSON object with an integer ts.
    """
    try:
        payload = json.loads(plaintext.decode("utf-8"))
    # ValueError covers bad UTF-8, bad JSON and over-long integer literals;
    # RecursionError covers pathologically nested arrays and objects.
    except (ValueError, RecursionError) as exc:
        raise MissingClaim("payload is not JSON") from exc

    if not isinstance(payload, dict):
        raise MissingClaim("payload is not a JSON object")

    ts = payload.get("ts")
    if not isinstance(ts, int) or isinstance(ts, bool):
        raise MissingClaim("payload has no integer ts")

    device = payload.get("device")
    data = payload.get("data")
    return DecryptedPayload(
        ts=ts,
        device=device if isinstance(device, str) else None,
        data=data if isinstance(data, str) else None,
    )
