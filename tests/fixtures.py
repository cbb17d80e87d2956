"""Shared constants and fakes for the test suite."""

from src.domain.ports.secret_store_port import ISecretStore

HMAC_SECRET = "my-secret-key-2024"
AES_KEY_HEX = "0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef"
AES_KEY = bytes.fromhex(AES_KEY_HEX)
NOW = 1737312000


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSecretStore(ISecretStore):
    def __init__(self, record: dict | None = None, error: Exception | None = None) -> None:
        self.record = record if record is not None else {"secretKey": HMAC_SECRET, "aesKey": AES_KEY_HEX}
        self.error = error
        self.calls: list[str] = []

    def get_secret(self, secret_id: str) -> dict:
        self.calls.append(secret_id)
        if self.error is not None:
            raise self.error
        return dict(self.record)
