"""
Error taxonomy for request authentication.
Zero external dependencies.

DecodeError and VerifyError are always client-caused and end in a 403 with a
generic message. ProviderError is operational and ends in a 500. The detail
carried by each exception is for logs only and never reaches the caller.
"""


class AuthError(Exception):
    """Base class for every error raised while evaluating one request."""


class DecodeError(AuthError, ValueError):
    """The raw token could not be parsed into a ParsedToken."""


class MalformedStructure(DecodeError):
    pass


class InvalidEncoding(DecodeError):
    pass


class InvalidLength(DecodeError):
    def __init__(self, field: str, expected: int, actual: int) -> None:
        super().__init__(f"{field}: expected {expected} bytes, got {actual}")
        self.field = field
        self.expected = expected
        self.actual = actual


class VerifyError(AuthError, ValueError):
    """The token parsed but did not prove possession of the secret."""


class SignatureMismatch(VerifyError):
    pass


class AuthenticationFailed(VerifyError):
    pass


class MissingClaim(VerifyError):
    pass


class StaleTimestamp(VerifyError):
    def __init__(self, timestamp: int, now: int, tolerance_seconds: int) -> None:
        super().__init__(
            f"timestamp {timestamp} is outside ±{tolerance_seconds}s of {now}"
        )
        self.timestamp = timestamp
        self.now = now
        self.tolerance_seconds = tolerance_seconds


class ProviderError(AuthError, RuntimeError):
    """Secret material could not be obtained."""


class ProviderUnavailable(ProviderError):
    pass
