"""Signature algorithms used to sign and verify tokens.

Concrete primitives come from PyJWT's algorithm table, which is built on
the cryptography package. This module only adapts them to `Algorithm`.
"""

from abc import ABC, abstractmethod
from typing import Any

from cryptography.exceptions import InvalidKey, UnsupportedAlgorithm
from jwt.algorithms import get_default_algorithms
from jwt.exceptions import InvalidKeyError

from jwtkit.core.errors import SignatureVerificationError, SigningError

HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")
RSA_ALGORITHMS = ("RS256", "RS384", "RS512")
RSA_PSS_ALGORITHMS = ("PS256", "PS384", "PS512")
ECDSA_ALGORITHMS = ("ES256", "ES256K", "ES384", "ES512")
EDDSA_ALGORITHMS = ("EdDSA",)
NONE_ALGORITHM = "none"

_KEY_ERRORS = (
    InvalidKeyError,
    InvalidKey,
    UnsupportedAlgorithm,
    ValueError,
    TypeError,
)


class Algorithm(ABC):
    """A named signature algorithm bound to its key material."""

    @abstractmethod
    def name(self) -> str:
        """Return the ``alg`` header value this algorithm produces."""

    @abstractmethod
    def sign(self, data: bytes) -> bytes:
        """Sign data, raising SigningError on failure."""

    @abstractmethod
    def verify(self, data: bytes, signature: bytes) -> None:
        """Check a signature, raising SignatureVerificationError on mismatch."""


class JWSAlgorithm(Algorithm):
    """One of the JWS algorithms registered in PyJWT.

    Keys may be PEM text or bytes, or cryptography key objects (an HMAC
    secret is plain text or bytes). Without a verifying key, verification
    uses the HMAC secret or the public half of the private key. Without a
    signing key the instance is verify-only.
    """

    def __init__(
        self,
        name: str,
        *,
        signing_key: Any = None,
        verifying_key: Any = None,
    ) -> None:
        algorithms = get_default_algorithms()
        if name == NONE_ALGORITHM or name not in algorithms:
            raise ValueError(f"Unsupported algorithm: {name}")
        self._name = name
        self._impl = algorithms[name]
        self._signing_key = self._prepare(signing_key)
        if verifying_key is None:
            self._verifying_key = _public_half(self._signing_key)
        else:
            self._verifying_key = self._prepare(verifying_key)

    def _prepare(self, key: Any) -> Any:
        if key is None:
            return None
        try:
            return self._impl.prepare_key(key)
        except _KEY_ERRORS as e:
            raise ValueError(f"Invalid key for {self._name}: {e}") from e

    def name(self) -> str:
        return self._name

    def sign(self, data: bytes) -> bytes:
        if self._signing_key is None:
            raise SigningError(f"No signing key configured for {self._name}")
        try:
            return self._impl.sign(data, self._signing_key)
        except (*_KEY_ERRORS, AttributeError) as e:
            raise SigningError(f"Failed to sign with {self._name}: {e}") from e

    def verify(self, data: bytes, signature: bytes) -> None:
        if self._verifying_key is None:
            msg = f"No verifying key configured for {self._name}"
            raise SignatureVerificationError(msg)
        try:
            valid = self._impl.verify(data, self._verifying_key, signature)
        except _KEY_ERRORS as e:
            raise SignatureVerificationError(f"invalid signature: {e}") from e
        if not valid:
            raise SignatureVerificationError()

    def __repr__(self) -> str:
        return f"JWSAlgorithm({self._name!r})"


class NoneAlgorithm(Algorithm):
    """Unsecured JWS (``alg: none``); only an empty signature verifies."""

    def name(self) -> str:
        return NONE_ALGORITHM

    def sign(self, data: bytes) -> bytes:
        return b""

    def verify(self, data: bytes, signature: bytes) -> None:
        if signature:
            raise SignatureVerificationError()


def hmac(name: str, secret: str | bytes) -> JWSAlgorithm:
    """Build an HMAC algorithm sharing one secret for signing and verifying."""
    _check_family(name, HMAC_ALGORITHMS)
    return JWSAlgorithm(name, signing_key=secret)


def rsa(name: str, public_key: Any = None, private_key: Any = None) -> JWSAlgorithm:
    """Build an RSASSA-PKCS1-v1_5 algorithm."""
    _check_family(name, RSA_ALGORITHMS)
    return JWSAlgorithm(name, signing_key=private_key, verifying_key=public_key)


def rsa_pss(
    name: str, public_key: Any = None, private_key: Any = None
) -> JWSAlgorithm:
    """Build an RSASSA-PSS algorithm."""
    _check_family(name, RSA_PSS_ALGORITHMS)
    return JWSAlgorithm(name, signing_key=private_key, verifying_key=public_key)


def ecdsa(name: str, public_key: Any = None, private_key: Any = None) -> JWSAlgorithm:
    """Build an ECDSA algorithm; signatures use the JWS r || s form."""
    _check_family(name, ECDSA_ALGORITHMS)
    return JWSAlgorithm(name, signing_key=private_key, verifying_key=public_key)


def eddsa(public_key: Any = None, private_key: Any = None) -> JWSAlgorithm:
    """Build an EdDSA (Ed25519 or Ed448) algorithm."""
    return JWSAlgorithm(
        EDDSA_ALGORITHMS[0], signing_key=private_key, verifying_key=public_key
    )


def _check_family(name: str, family: tuple[str, ...]) -> None:
    if name not in family:
        raise ValueError(f"{name} is not one of {', '.join(family)}")


def _public_half(key: Any) -> Any:
    """Return the public key of a private key; secrets are returned as is."""
    public_key = getattr(key, "public_key", None)
    return public_key() if callable(public_key) else key
