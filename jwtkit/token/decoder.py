"""Decoding of compact serialized tokens."""

from collections.abc import Callable

from structlog.stdlib import BoundLogger

from jwtkit.claims.backend import JSONBackend, default_backend
from jwtkit.claims.claim_map import ClaimMap
from jwtkit.claims.views import HeaderClaims, PayloadClaims
from jwtkit.core.errors import InvalidJSONError, InvalidTokenFormatError
from jwtkit.core.logging import get_logger
from jwtkit.token.codec import default_codec

SEPARATOR = "."

SegmentDecoder = Callable[[str], bytes]


class DecodedJWT(HeaderClaims, PayloadClaims):
    """A token split into its segments with parsed header and payload.

    Decoding does not verify anything; pass the result to a
    `jwtkit.verify.verifier.Verifier` before trusting its claims.
    """

    def __init__(
        self,
        token: str,
        decode_segment: SegmentDecoder | None = None,
        backend: JSONBackend | None = None,
    ) -> None:
        decode_segment = decode_segment or default_codec().decode_segment
        backend = backend or default_backend()

        header_end = token.find(SEPARATOR)
        if header_end == -1:
            raise InvalidTokenFormatError()
        payload_end = token.find(SEPARATOR, header_end + 1)
        if payload_end == -1:
            raise InvalidTokenFormatError()

        self._token = token
        self._header_base64 = token[:header_end]
        self._payload_base64 = token[header_end + 1 : payload_end]
        self._signature_base64 = token[payload_end + 1 :]

        self._header = _to_text(decode_segment(self._header_base64))
        self._payload = _to_text(decode_segment(self._payload_base64))
        self._signature = decode_segment(self._signature_base64)

        self.header_claims = ClaimMap.parse(self._header, backend)
        self.payload_claims = ClaimMap.parse(self._payload, backend)

    @property
    def token(self) -> str:
        return self._token

    @property
    def header(self) -> str:
        """Header JSON text."""
        return self._header

    @property
    def header_base64(self) -> str:
        return self._header_base64

    @property
    def payload(self) -> str:
        """Payload JSON text."""
        return self._payload

    @property
    def payload_base64(self) -> str:
        return self._payload_base64

    @property
    def signature(self) -> bytes:
        return self._signature

    @property
    def signature_base64(self) -> str:
        return self._signature_base64

    @property
    def signing_input(self) -> bytes:
        """The bytes covered by the signature."""
        return f"{self._header_base64}{SEPARATOR}{self._payload_base64}".encode()

    def __repr__(self) -> str:
        return f"DecodedJWT(header={self._header!r}, payload={self._payload!r})"


def _to_text(segment: bytes) -> str:
    try:
        return segment.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidJSONError("invalid json: segment is not UTF-8") from e


def decode(
    token: str,
    decode_segment: SegmentDecoder | None = None,
    *,
    backend: JSONBackend | None = None,
    logger: BoundLogger | None = None,
) -> DecodedJWT:
    """Decode a compact token without verifying it."""
    decoded = DecodedJWT(token, decode_segment, backend)
    (logger or get_logger()).debug(
        "Decoded token",
        header=sorted(decoded.header_claims),
        claims=sorted(decoded.payload_claims),
    )
    return decoded
