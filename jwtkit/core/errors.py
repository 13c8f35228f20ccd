"""Error kinds and exceptions raised by token decoding, signing and verification."""

from enum import StrEnum
from typing import ClassVar


class ErrorKind(StrEnum):
    """Stable identifier for every failure the library can report."""

    INVALID_JSON = "invalid_json"
    CLAIM_NOT_PRESENT = "claim_not_present"
    TYPE_MISMATCH = "type_mismatch"
    INVALID_TOKEN_FORMAT = "invalid_token_format"
    INVALID_ENCODING = "invalid_encoding"
    SIGNING_FAILED = "signing_failed"
    WRONG_ALGORITHM = "wrong_algorithm"
    SIGNATURE_INVALID = "signature_invalid"
    MISSING_CLAIM = "missing_claim"
    CLAIM_TYPE_MISMATCH = "claim_type_mismatch"
    CLAIM_VALUE_MISMATCH = "claim_value_mismatch"
    TOKEN_EXPIRED = "token_expired"
    AUDIENCE_MISMATCH = "audience_mismatch"


_DEFAULT_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.INVALID_JSON: "invalid json",
    ErrorKind.CLAIM_NOT_PRESENT: "claim not found",
    ErrorKind.TYPE_MISMATCH: "claim has a different JSON type",
    ErrorKind.INVALID_TOKEN_FORMAT: "invalid token supplied",
    ErrorKind.INVALID_ENCODING: "invalid base64url input",
    ErrorKind.SIGNING_FAILED: "failed to sign token",
    ErrorKind.WRONG_ALGORITHM: "wrong algorithm",
    ErrorKind.SIGNATURE_INVALID: "invalid signature",
    ErrorKind.MISSING_CLAIM: "decoded JWT is missing required claim(s)",
    ErrorKind.CLAIM_TYPE_MISMATCH: "claim type does not match expected type",
    ErrorKind.CLAIM_VALUE_MISMATCH: "claim value does not match expected value",
    ErrorKind.TOKEN_EXPIRED: "token expired",
    ErrorKind.AUDIENCE_MISMATCH: "token doesn't contain the required audience",
}


class JWTError(Exception):
    """Base class for all errors raised by jwtkit."""

    kind: ClassVar[ErrorKind]

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or _DEFAULT_MESSAGES[self.kind])

    def __str__(self) -> str:
        return str(self.args[0])


class InvalidJSONError(JWTError):
    """Text could not be parsed as the expected JSON document."""

    kind = ErrorKind.INVALID_JSON


class ClaimNotPresentError(JWTError, KeyError):
    """A claim was requested from a map that does not contain it."""

    kind = ErrorKind.CLAIM_NOT_PRESENT


class BadCastError(JWTError, TypeError):
    """A JSON value was read as a type it does not have."""

    kind = ErrorKind.TYPE_MISMATCH


class InvalidTokenFormatError(JWTError, ValueError):
    """A compact token does not have three dot-separated segments."""

    kind = ErrorKind.INVALID_TOKEN_FORMAT


class InvalidEncodingError(JWTError, ValueError):
    """A segment is not valid base64url."""

    kind = ErrorKind.INVALID_ENCODING


class SigningError(JWTError):
    """An algorithm failed to produce a signature."""

    kind = ErrorKind.SIGNING_FAILED


class SignatureVerificationError(JWTError):
    """An algorithm rejected a signature."""

    kind = ErrorKind.SIGNATURE_INVALID


class TokenVerificationError(JWTError):
    """A decoded token failed verification.

    Unlike the other errors the kind is set per instance, since the
    verifier reports every verification failure through this one type.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str | None = None,
        *,
        claim: str | None = None,
    ) -> None:
        self.kind = kind  # type: ignore[misc]
        self.claim = claim
        super().__init__(message)
