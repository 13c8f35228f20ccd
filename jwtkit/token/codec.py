"""Base64url codec for compact token segments."""

import binascii
from abc import ABC, abstractmethod
from base64 import b64decode, urlsafe_b64encode

from jwtkit.core.errors import InvalidEncodingError

PAD = "="


class Codec(ABC):
    """Segment encoding used by the decoder and builder."""

    @abstractmethod
    def encode(self, data: bytes) -> str:
        """Encode bytes, keeping padding."""

    @abstractmethod
    def decode(self, text: str) -> bytes:
        """Decode padded text."""

    @abstractmethod
    def pad(self, text: str) -> str:
        """Add the padding an unpadded segment is missing."""

    @abstractmethod
    def trim(self, text: str) -> str:
        """Strip padding."""

    def encode_segment(self, data: bytes) -> str:
        """Encode bytes for the compact form, without padding."""
        return self.trim(self.encode(data))

    def decode_segment(self, text: str) -> bytes:
        """Decode a compact segment, padded or not."""
        return self.decode(self.pad(text))


class Base64URLCodec(Codec):
    """RFC 4648 section 5 alphabet with strict decoding."""

    def encode(self, data: bytes) -> str:
        return urlsafe_b64encode(data).decode("ascii")

    def decode(self, text: str) -> bytes:
        if "+" in text or "/" in text:
            raise InvalidEncodingError("invalid base64url input: standard alphabet")
        try:
            return b64decode(text.encode("ascii"), altchars=b"-_", validate=True)
        except (binascii.Error, UnicodeEncodeError) as e:
            raise InvalidEncodingError(f"invalid base64url input: {e}") from e

    def pad(self, text: str) -> str:
        if PAD in text:
            return text
        remainder = len(text) % 4
        if remainder == 1:
            raise InvalidEncodingError("invalid base64url input: bad length")
        return text + PAD * (-len(text) % 4)

    def trim(self, text: str) -> str:
        return text.rstrip(PAD)


_default_codec = Base64URLCodec()


def default_codec() -> Codec:
    """Return the shared base64url codec."""
    return _default_codec
