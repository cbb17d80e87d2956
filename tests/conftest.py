import pytest

from src.application.services.proof_validator import ProofValidator
from src.application.services.token_issuer import TokenIssuer
from src.infrastructure.crypto.aesgcm_cipher import AesGcmCipher
from tests.fixtures import FakeClock


@pytest.fixture
def cipher() -> AesGcmCipher:
    return AesGcmCipher()


@pytest.fixture
def issuer(cipher) -> TokenIssuer:
    return TokenIssuer(cipher)


@pytest.fixture
def validator(cipher) -> ProofValidator:
    return ProofValidator(cipher)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
