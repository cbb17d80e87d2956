"""
Application service: parse raw header values into a ParsedToken.

Pure and total over its input: no cryptography, no secret lookup, and every
malformed value raises a DecodeError subclass rather than anything else.
"""

import re
from typing import Optional

from src.domain.entities.token import EncryptedEnvelope, ParsedToken, Scheme, SignedTimestamp
from src.domain.errors import InvalidEncoding, InvalidLength, MalformedStructure

SIGNATURE_SIZE = 32
NONCE_SIZE = 12
TAG_SIZE = 16

ENVELOPE_SEPARATOR = ":"

# Unix seconds; anything longer cannot be a real timestamp.
_DIGITS_RE = re.compile(r"[0-9]{1,19}")
# bytes.fromhex() tolerates whitespace, so validate strictly before decoding.
_HEX_RE = re.compile(r"(?:[0-9a-fA-F]{2})*")


def decode(raw: str, scheme: Scheme, signature: Optional[str] = None) -> ParsedToken:
    """Decode *raw* according to *scheme*.

    Args:
        raw:       X-Bot-Token (scheme 1) or X-Auth-Token (scheme 2) value.
        scheme:    Which wire format *raw* is expected to follow.
        signature: X-Bot-Signature value; required for the signed-timestamp scheme.

    Raises:
        MalformedStructure: wrong number of envelope fields.
        InvalidEncoding:    non-decimal timestamp or non-hex field.
        InvalidLength:      signature, nonce or tag of the wrong size.
    """
    if scheme is Scheme.SIGNED_TIMESTAMP:
        return _decode_signed_timestamp(raw, signature)
    if scheme is Scheme.ENCRYPTED_ENVELOPE:
        return _decode_envelope(raw)
    raise InvalidEncoding(f"unknown scheme: {scheme!r}")


def _decode_signed_timestamp(raw: str, signature: Optional[str]) -> SignedTimestamp:
    if not isinstance(raw, str) or not _DIGITS_RE.fullmatch(raw):
        raise InvalidEncoding("timestamp is not a decimal integer")
    sig = _unhex("signature", signature)
    if len(sig) != SIGNATURE_SIZE:
        raise InvalidLength("signature", SIGNATURE_SIZE, len(sig))
    return SignedTimestamp(timestamp=raw, signature=sig)


def _decode_envelope(raw: str) -> EncryptedEnvelope:
    if not isinstance(raw, str):
        raise InvalidEncoding("token is not a string")
    parts = raw.split(ENVELOPE_SEPARATOR)
    if len(parts) != 3:
        raise MalformedStructure(
            f"expected nonce:ciphertext:tag, got {len(parts)} field(s)"
        )
    nonce_hex, ciphertext_hex, tag_hex = parts
    nonce = _unhex("nonce", nonce_hex)
    ciphertext = _unhex("ciphertext", ciphertext_hex)
    tag = _unhex("tag", tag_hex)

    if len(nonce) != NONCE_SIZE:
        raise InvalidLength("nonce", NONCE_SIZE, len(nonce))
    if len(tag) != TAG_SIZE:
        raise InvalidLength("tag", TAG_SIZE, len(tag))
    return EncryptedEnvelope(nonce=nonce, ciphertext=ciphertext, tag=tag)


def _unhex(field: str, value: Optional[str]) -> bytes:
    if not isinstance(value, str) or not _HEX_RE.fullmatch(value):
        raise InvalidEncoding(f"{field} is not valid hex")
    return bytes.fromhex(value)
