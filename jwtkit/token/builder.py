"""Building and signing new tokens."""

from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Any, Self

from structlog.stdlib import BoundLogger

from jwtkit.claims.backend import JSONBackend, default_backend
from jwtkit.claims.claim import Claim
from jwtkit.core.logging import get_logger
from jwtkit.crypto.algorithms import Algorithm
from jwtkit.token.codec import default_codec
from jwtkit.token.decoder import SEPARATOR

SegmentEncoder = Callable[[bytes], str]


class Builder:
    """Accumulates header and payload claims and signs them into a token.

    Every setter replaces any earlier value under the same name and
    returns the builder so calls can be chained. Signing does not change
    the builder, so one builder can produce several tokens.
    """

    def __init__(
        self,
        backend: JSONBackend | None = None,
        logger: BoundLogger | None = None,
    ) -> None:
        self._backend = backend or default_backend()
        self._logger = logger or get_logger()
        self._header_claims: dict[str, Any] = {}
        self._payload_claims: dict[str, Any] = {}

    def _to_value(self, claim: Claim | Any) -> Any:
        if isinstance(claim, Claim):
            return claim.to_json()
        return claim

    def set_header_claim(self, name: str, claim: Claim | Any) -> Self:
        """Set a header parameter from a claim or a backend value."""
        self._header_claims[name] = self._to_value(claim)
        return self

    def set_payload_claim(self, name: str, claim: Claim | Any) -> Self:
        """Set a payload claim from a claim or a backend value."""
        self._payload_claims[name] = self._to_value(claim)
        return self

    def set_algorithm(self, alg: str) -> Self:
        """Set ``alg``; normally left to `sign`."""
        return self.set_header_claim("alg", self._backend.make_string(alg))

    def set_type(self, typ: str) -> Self:
        return self.set_header_claim("typ", self._backend.make_string(typ))

    def set_content_type(self, cty: str) -> Self:
        return self.set_header_claim("cty", self._backend.make_string(cty))

    def set_key_id(self, kid: str) -> Self:
        return self.set_header_claim("kid", self._backend.make_string(kid))

    def set_issuer(self, iss: str) -> Self:
        return self.set_payload_claim("iss", self._backend.make_string(iss))

    def set_subject(self, sub: str) -> Self:
        return self.set_payload_claim("sub", self._backend.make_string(sub))

    def set_audience(self, aud: str | Iterable[str]) -> Self:
        """Set ``aud`` to a single string or to an array of strings."""
        if isinstance(aud, str):
            return self.set_payload_claim("aud", self._backend.make_string(aud))
        items = [self._backend.make_string(a) for a in aud]
        return self.set_payload_claim("aud", self._backend.make_array(items))

    def set_expires_at(self, when: datetime) -> Self:
        return self.set_payload_claim("exp", Claim.from_date(when, self._backend))

    def set_not_before(self, when: datetime) -> Self:
        return self.set_payload_claim("nbf", Claim.from_date(when, self._backend))

    def set_issued_at(self, when: datetime) -> Self:
        return self.set_payload_claim("iat", Claim.from_date(when, self._backend))

    def set_id(self, jti: str) -> Self:
        return self.set_payload_claim("jti", self._backend.make_string(jti))

    def sign(
        self, algorithm: Algorithm, encode_segment: SegmentEncoder | None = None
    ) -> str:
        """Serialize, sign and return the compact token.

        If no ``alg`` header was set, it is set to ``algorithm.name()``.
        Raises SigningError, producing no token, if the algorithm cannot sign.
        """
        encode_segment = encode_segment or default_codec().encode_segment
        header_claims = dict(self._header_claims)
        if "alg" not in header_claims:
            header_claims["alg"] = self._backend.make_string(algorithm.name())

        header = self._backend.serialize(self._backend.make_object(header_claims))
        payload = self._backend.serialize(
            self._backend.make_object(self._payload_claims)
        )
        signing_input = (
            encode_segment(header.encode())
            + SEPARATOR
            + encode_segment(payload.encode())
        )

        signature = algorithm.sign(signing_input.encode())
        self._logger.debug(
            "Signed token",
            alg=algorithm.name(),
            claims=sorted(self._payload_claims),
        )
        return signing_input + SEPARATOR + encode_segment(signature)


def create(backend: JSONBackend | None = None) -> Builder:
    """Start building a new token."""
    return Builder(backend)
