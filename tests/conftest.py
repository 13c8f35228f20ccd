"""Shared test fixtures for jwtkit."""

import os

import pytest

from jwtkit.crypto import algorithms
from jwtkit.crypto.keys import generate_rsa_keypair
from jwtkit.crypto.types import SigningKeyData
from jwtkit.verify.clock import FixedClock

NOW = 1_700_000_000
HMAC_SECRET = "a-test-secret-long-enough-for-every-hmac-algorithm-0123456789abcdef"


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep verifier settings from leaking in from the environment."""
    for name in list(os.environ):
        if name.startswith("JWT_VERIFY_"):
            monkeypatch.delenv(name)


@pytest.fixture
def clock() -> FixedClock:
    """A clock stopped at a known Unix timestamp."""
    return FixedClock.at_timestamp(NOW)


@pytest.fixture
def hs256() -> algorithms.JWSAlgorithm:
    return algorithms.hmac("HS256", HMAC_SECRET)


@pytest.fixture(scope="session")
def rsa_keypair() -> SigningKeyData:
    """One RSA keypair for the whole run; generation is slow."""
    return generate_rsa_keypair()


@pytest.fixture
def rs256(rsa_keypair: SigningKeyData) -> algorithms.JWSAlgorithm:
    return algorithms.rsa(
        "RS256",
        public_key=rsa_keypair.public_key_pem,
        private_key=rsa_keypair.private_key_pem,
    )
