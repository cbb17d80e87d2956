"""
Port (interface) for authenticated (AEAD) ciphers.
Infrastructure adapters (e.g. AesGcmCipher) must implement this interface.
"""

from abc import ABC, abstractmethod


class IAeadCipher(ABC):
    NONCE_SIZE: int = 12
    TAG_SIZE: int = 16
    KEY_SIZE: int = 32

    @abstractmethod
    def encrypt(self, key: bytes, nonce: bytes, plaintext: bytes) -> tuple[bytes, bytes]:
        """Encrypt *plaintext* and return (ciphertext, tag)."""
        ...

    @abstractmethod
    def decrypt(self, key: bytes, nonce: bytes, ciphertext: bytes, tag: bytes) -> bytes:
        """Authenticate and decrypt, returning the plaintext.

        Raises:
            AuthenticationFailed: on a bad tag or any other decryption failure.
                                  The two cases are deliberately indistinguishable.
        """
        ...
