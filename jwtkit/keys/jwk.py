"""JSON Web Keys and key sets (RFC 7517)."""

from collections.abc import Iterator
from typing import Any, Self

from jwtkit.claims.backend import JSONBackend, JSONType, default_backend
from jwtkit.claims.claim import Claim
from jwtkit.claims.claim_map import ClaimMap
from jwtkit.core.errors import BadCastError, ClaimNotPresentError, InvalidJSONError


class JWK:
    """A single key with accessors for the registered parameters.

    Key-type specific parameters (``n``, ``e``, ``x``, ...) are kept as is
    and can be read with `get_jwk_claim`.
    """

    __slots__ = ("_claims",)

    def __init__(self, value: Any, backend: JSONBackend | None = None) -> None:
        backend = backend or default_backend()
        self._claims = ClaimMap(backend.as_object(value), backend)

    @classmethod
    def parse(cls, text: str, backend: JSONBackend | None = None) -> Self:
        """Parse a JWK from JSON text."""
        claims = ClaimMap.parse(text, backend)
        return cls(claims.to_json(), claims.backend)

    @property
    def claims(self) -> ClaimMap:
        return self._claims

    def get_key_type(self) -> str:
        return self.get_jwk_claim("kty").as_string()

    def get_use(self) -> str:
        return self.get_jwk_claim("use").as_string()

    def get_key_operations(self) -> frozenset[str]:
        return self.get_jwk_claim("key_ops").as_set()

    def get_algorithm(self) -> str:
        return self.get_jwk_claim("alg").as_string()

    def get_key_id(self) -> str:
        return self.get_jwk_claim("kid").as_string()

    def get_curve(self) -> str:
        return self.get_jwk_claim("crv").as_string()

    def get_x5c(self) -> list[Any]:
        return self.get_jwk_claim("x5c").as_array()

    def get_x5u(self) -> str:
        return self.get_jwk_claim("x5u").as_string()

    def get_x5t(self) -> str:
        return self.get_jwk_claim("x5t").as_string()

    def get_x5t_sha256(self) -> str:
        return self.get_jwk_claim("x5t#S256").as_string()

    def get_x5c_key_value(self) -> str:
        """Return the first certificate of the ``x5c`` chain."""
        chain = self.get_x5c()
        if not chain:
            raise ClaimNotPresentError("x5c is empty")
        return self._claims.backend.as_string(chain[0])

    def has_key_type(self) -> bool:
        return self.has_jwk_claim("kty")

    def has_use(self) -> bool:
        return self.has_jwk_claim("use")

    def has_key_operations(self) -> bool:
        return self.has_jwk_claim("key_ops")

    def has_algorithm(self) -> bool:
        return self.has_jwk_claim("alg")

    def has_curve(self) -> bool:
        return self.has_jwk_claim("crv")

    def has_key_id(self) -> bool:
        return self.has_jwk_claim("kid")

    def has_x5u(self) -> bool:
        return self.has_jwk_claim("x5u")

    def has_x5c(self) -> bool:
        return self.has_jwk_claim("x5c")

    def has_x5t(self) -> bool:
        return self.has_jwk_claim("x5t")

    def has_x5t_sha256(self) -> bool:
        return self.has_jwk_claim("x5t#S256")

    def has_jwk_claim(self, name: str) -> bool:
        return self._claims.has_claim(name)

    def get_jwk_claim(self, name: str) -> Claim:
        return self._claims.get_claim(name)

    def get_jwk_claims(self) -> dict[str, Claim]:
        return self._claims.get_claims()

    def empty(self) -> bool:
        return len(self._claims) == 0

    def serialize(self) -> str:
        return self._claims.serialize()

    def __repr__(self) -> str:
        return f"JWK({self.serialize()})"


class JWKS:
    """An ordered set of keys looked up by key ID.

    Key sets are small, so lookups scan the list instead of keeping an
    index. Keys without a ``kid`` are kept but never match a lookup.
    """

    __slots__ = ("_keys",)

    def __init__(self, keys: list[JWK]) -> None:
        self._keys = list(keys)

    @classmethod
    def parse(cls, text: str, backend: JSONBackend | None = None) -> Self:
        """Parse a JWKS document with a required ``keys`` array."""
        document = ClaimMap.parse(text, backend)
        if not document.has_claim("keys"):
            raise InvalidJSONError("invalid json: no keys property in JWKS")
        keys = document.get_claim("keys")
        try:
            is_array = keys.get_type() is JSONType.ARRAY
        except BadCastError as e:
            raise InvalidJSONError("invalid json: keys property is not an array") from e
        if not is_array:
            raise InvalidJSONError("invalid json: keys property is not an array")
        return cls([JWK(value, document.backend) for value in keys.as_array()])

    def has_jwk(self, key_id: str) -> bool:
        return self._find_by_kid(key_id) is not None

    def get_jwk(self, key_id: str) -> JWK:
        """Return the first key with this ``kid``."""
        jwk = self._find_by_kid(key_id)
        if jwk is None:
            raise ClaimNotPresentError(f"no key with kid {key_id}")
        return jwk

    def _find_by_kid(self, key_id: str) -> JWK | None:
        for jwk in self._keys:
            if not jwk.has_key_id():
                continue
            try:
                if jwk.get_key_id() == key_id:
                    return jwk
            except BadCastError:
                continue
        return None

    def __iter__(self) -> Iterator[JWK]:
        return iter(self._keys)

    def __len__(self) -> int:
        return len(self._keys)

    def __getitem__(self, index: int) -> JWK:
        return self._keys[index]


def parse_jwk(text: str, backend: JSONBackend | None = None) -> JWK:
    return JWK.parse(text, backend)


def parse_jwks(text: str, backend: JSONBackend | None = None) -> JWKS:
    return JWKS.parse(text, backend)
