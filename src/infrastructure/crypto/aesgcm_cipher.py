"""
Infrastructure adapter: cryptography AESGCM → IAeadCipher.

AESGCM expects ciphertext||tag as one buffer; the wire format carries the tag
separately, so the split and join happen here and nowhere else.
"""

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from src.domain.errors import AuthenticationFailed
from src.domain.ports.cipher_port import IAeadCipher


class AesGcmCipher(IAeadCipher):
    """AES-256-GCM with a 12-byte nonce, 16-byte tag and no associated data."""

    def encrypt(self, key: bytes, nonce: bytes, plaintext: bytes) -> tuple[bytes, bytes]:
        sealed = AESGCM(key).encrypt(nonce, plaintext, None)
        return sealed[: -self.TAG_SIZE], sealed[-self.TAG_SIZE :]

    def decrypt(self, key: bytes, nonce: bytes, ciphertext: bytes, tag: bytes) -> bytes:
        if len(key) != self.KEY_SIZE:
            raise AuthenticationFailed("decryption failed")
        try:
            return AESGCM(key).decrypt(nonce, ciphertext + tag, None)
        except (InvalidTag, ValueError, TypeError) as exc:
            raise AuthenticationFailed("decryption failed") from exc
