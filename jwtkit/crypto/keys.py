"""Keypair generation and conversion between PEM keys and JWKs."""

import base64
from typing import Any

import uuid_utils
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from jwt import PyJWK
from jwt.exceptions import InvalidKeyError, PyJWKError

from jwtkit.claims.backend import JSONBackend, default_backend
from jwtkit.crypto import algorithms
from jwtkit.crypto.types import SigningKeyData
from jwtkit.keys.jwk import JWK

RSA_KEY_SIZE = 2048
RSA_PUBLIC_EXPONENT = 65537

_CURVES: dict[str, tuple[ec.EllipticCurve, str, str]] = {
    "ES256": (ec.SECP256R1(), "P-256", "ES256"),
    "ES256K": (ec.SECP256K1(), "secp256k1", "ES256K"),
    "ES384": (ec.SECP384R1(), "P-384", "ES384"),
    "ES512": (ec.SECP521R1(), "P-521", "ES512"),
}
_CURVE_NAMES = {curve.name: (crv, alg) for curve, crv, alg in _CURVES.values()}


def _new_kid() -> str:
    return str(uuid_utils.uuid7())


def _pem_pair(private_key: Any) -> tuple[str, str]:
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()
    public_pem = (
        private_key.public_key()
        .public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        .decode()
    )
    return private_pem, public_pem


def generate_rsa_keypair(algorithm: str = "RS256") -> SigningKeyData:
    """Generate a new RSA-2048 keypair for RS* or PS* signing."""
    private_key = rsa.generate_private_key(
        public_exponent=RSA_PUBLIC_EXPONENT,
        key_size=RSA_KEY_SIZE,
    )
    private_pem, public_pem = _pem_pair(private_key)
    return SigningKeyData(
        kid=_new_kid(),
        algorithm=algorithm,
        private_key_pem=private_pem,
        public_key_pem=public_pem,
    )


def generate_ec_keypair(algorithm: str = "ES256") -> SigningKeyData:
    """Generate a new EC keypair on the curve the algorithm requires."""
    if algorithm not in _CURVES:
        raise ValueError(f"{algorithm} is not an ECDSA algorithm")
    curve, _, _ = _CURVES[algorithm]
    private_pem, public_pem = _pem_pair(ec.generate_private_key(curve))
    return SigningKeyData(
        kid=_new_kid(),
        algorithm=algorithm,
        private_key_pem=private_pem,
        public_key_pem=public_pem,
    )


def _int_to_base64url(value: int, length: int | None = None) -> str:
    """Encode an integer as base64url without padding."""
    byte_length = length or (value.bit_length() + 7) // 8
    raw = value.to_bytes(byte_length, byteorder="big")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


def public_key_to_jwk(
    public_key_pem: str,
    kid: str,
    alg: str | None = None,
    backend: JSONBackend | None = None,
) -> JWK:
    """Convert a PEM public key (RSA or EC) to a signing JWK."""
    loaded = serialization.load_pem_public_key(public_key_pem.encode())
    members: dict[str, object]
    if isinstance(loaded, rsa.RSAPublicKey):
        numbers = loaded.public_numbers()
        members = {
            "kty": "RSA",
            "use": "sig",
            "alg": alg or "RS256",
            "kid": kid,
            "n": _int_to_base64url(numbers.n),
            "e": _int_to_base64url(numbers.e),
        }
    elif isinstance(loaded, ec.EllipticCurvePublicKey):
        if loaded.curve.name not in _CURVE_NAMES:
            raise ValueError(f"Unsupported curve: {loaded.curve.name}")
        crv, default_alg = _CURVE_NAMES[loaded.curve.name]
        size = (loaded.curve.key_size + 7) // 8
        point = loaded.public_numbers()
        members = {
            "kty": "EC",
            "use": "sig",
            "alg": alg or default_alg,
            "kid": kid,
            "crv": crv,
            "x": _int_to_base64url(point.x, size),
            "y": _int_to_base64url(point.y, size),
        }
    else:
        raise ValueError(f"Unsupported key type: {type(loaded).__name__}")
    backend = backend or default_backend()
    return JWK(backend.from_native(members), backend)


def algorithm_from_jwk(jwk: JWK, name: str | None = None) -> algorithms.JWSAlgorithm:
    """Build a verify-only algorithm from a public JWK.

    Uses the JWK's ``alg`` unless a name is given. Raises ClaimNotPresentError
    when neither is available and ValueError for an unusable key.
    """
    alg = name or jwk.get_algorithm()
    if alg == algorithms.NONE_ALGORITHM:
        raise ValueError("JWKs cannot describe the none algorithm")
    try:
        key = PyJWK.from_json(jwk.serialize(), algorithm=alg).key
    except (PyJWKError, InvalidKeyError) as e:
        raise ValueError(f"Cannot use JWK for {alg}: {e}") from e
    return algorithms.JWSAlgorithm(alg, verifying_key=key)
