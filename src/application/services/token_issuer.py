"""
Application service: mint tokens that the authenticator accepts.

Used by clients calling through the edge and by the test suite. Produces the
same wire formats the token codec parses.
"""

import hashlib
import hmac
import json
import os
import time
from typing import Optional

from src.domain.ports.cipher_port import IAeadCipher


class TokenIssuer:
    """Issue signed-timestamp and encrypted-envelope tokens."""

    def __init__(self, cipher: IAeadCipher) -> None:
        self._cipher = cipher

    @staticmethod
    def sign_timestamp(secret: bytes | str, timestamp: Optional[int] = None) -> tuple[str, str]:
        """Return (X-Bot-Token, X-Bot-Signature) for *timestamp* (default: now)."""
        if isinstance(secret, str):
            secret = secret.encode("utf-8")
        token = str(int(time.time()) if timestamp is None else timestamp)
        signature = hmac.new(secret, token.encode("ascii"), hashlib.sha256).hexdigest()
        return token, signature

    def seal_envelope(
        self,
        key: bytes,
        ts: Optional[int] = None,
        device: Optional[str] = None,
        data: Optional[str] = None,
        nonce: Optional[bytes] = None,
    ) -> str:
        """Return an X-Auth-Token value: <nonce_hex>:<ciphertext_hex>:<tag_hex>.

        Args:
            key:    32-byte AES-256 key.
            ts:     Unix timestamp in seconds (default: now).
            device: Optional device id, surfaced downstream as X-Validated-Device.
            data:   Optional opaque data.
            nonce:  12-byte nonce; a fresh random one is drawn when omitted.
                    Never reuse a nonce with the same key.
        """
        payload = {"ts": int(time.time()) if ts is None else ts}
        if device is not None:
            payload["device"] = device
        if data is not None:
            payload["data"] = data
        plaintext = json.dumps(payload, separators=(",", ":")).encode("utf-8")

        nonce = nonce if nonce is not None else os.urandom(IAeadCipher.NONCE_SIZE)
        ciphertext, tag = self._cipher.encrypt(key, nonce, plaintext)
        return f"{nonce.hex()}:{ciphertext.hex()}:{tag.hex()}"
