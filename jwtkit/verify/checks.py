"""Claim checks run by the verifier.

A check is any callable that accepts a `VerifyContext` and raises
`TokenVerificationError` when the token does not satisfy it. The models
below are the built-in kinds; `Verifier.with_claim` also accepts plain
functions.
"""

from collections.abc import Callable
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from jwtkit.claims.backend import JSONType
from jwtkit.claims.claim import Claim
from jwtkit.core.errors import BadCastError, ErrorKind, TokenVerificationError
from jwtkit.token.decoder import DecodedJWT


class VerifyContext(BaseModel):
    """State shared by every check during one verification.

    The current time is sampled once per verification so all checks agree
    on it. ``claim_key`` is the registry name of the check being run.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    current_time: datetime
    token: DecodedJWT
    default_leeway: int = 0
    claim_key: str = ""

    def has_claim(self, in_header: bool = False) -> bool:
        if in_header:
            return self.token.has_header_claim(self.claim_key)
        return self.token.has_payload_claim(self.claim_key)

    def get_claim(
        self, in_header: bool = False, json_type: JSONType | None = None
    ) -> Claim:
        """Return the claim under ``claim_key``, optionally of a given type."""
        if not self.has_claim(in_header):
            raise TokenVerificationError(
                ErrorKind.MISSING_CLAIM, claim=self.claim_key
            )
        if in_header:
            claim = self.token.get_header_claim(self.claim_key)
        else:
            claim = self.token.get_payload_claim(self.claim_key)
        if json_type is not None and type_of(claim) is not json_type:
            raise TokenVerificationError(
                ErrorKind.CLAIM_TYPE_MISMATCH, claim=self.claim_key
            )
        return claim


ClaimCheck = Callable[[VerifyContext], None]


def type_of(claim: Claim) -> JSONType | None:
    """Return the JSON type of a claim, or None for values like null."""
    try:
        return claim.get_type()
    except BadCastError:
        return None


class _BaseCheck(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    in_header: bool = False

    def _fail(self, ctx: VerifyContext, kind: ErrorKind) -> TokenVerificationError:
        return TokenVerificationError(kind, claim=ctx.claim_key)


class EqualsClaim(_BaseCheck):
    """The claim must have the expected JSON type and value."""

    expected: Claim

    def __call__(self, ctx: VerifyContext) -> None:
        expected_type = self.expected.get_type()
        claim = ctx.get_claim(self.in_header, expected_type)
        if expected_type is JSONType.BOOLEAN:
            matches = self.expected.as_bool() == claim.as_bool()
        elif expected_type is JSONType.INTEGER:
            matches = self.expected.as_int() == claim.as_int()
        elif expected_type is JSONType.NUMBER:
            matches = self.expected.as_number() == claim.as_number()
        elif expected_type is JSONType.STRING:
            matches = self.expected.as_string() == claim.as_string()
        else:
            try:
                matches = self.expected.canonical() == claim.canonical()
            except BadCastError:
                matches = False
        if not matches:
            raise self._fail(ctx, ErrorKind.CLAIM_VALUE_MISMATCH)


class DateBeforeClaim(_BaseCheck):
    """The current time must not be past the claim plus leeway (``exp``).

    ``leeway`` of `None` uses the verifier's default leeway. An optional
    check passes when the claim is absent.
    """

    leeway: int | None = None
    required: bool = True

    def __call__(self, ctx: VerifyContext) -> None:
        if not self.required and not ctx.has_claim(self.in_header):
            return
        claim = ctx.get_claim(self.in_header, JSONType.INTEGER)
        leeway = ctx.default_leeway if self.leeway is None else self.leeway
        if ctx.current_time.timestamp() > claim.as_int() + leeway:
            raise self._fail(ctx, ErrorKind.TOKEN_EXPIRED)


class DateAfterClaim(_BaseCheck):
    """The current time must not be before the claim minus leeway.

    Used for ``nbf`` and ``iat``. Leeway and optionality work as in
    `DateBeforeClaim`.
    """

    leeway: int | None = None
    required: bool = True

    def __call__(self, ctx: VerifyContext) -> None:
        if not self.required and not ctx.has_claim(self.in_header):
            return
        claim = ctx.get_claim(self.in_header, JSONType.INTEGER)
        leeway = ctx.default_leeway if self.leeway is None else self.leeway
        if ctx.current_time.timestamp() < claim.as_int() - leeway:
            raise self._fail(ctx, ErrorKind.TOKEN_EXPIRED)


class IsSubsetClaim(_BaseCheck):
    """Every expected value must appear in the claim.

    A string claim counts as a one-element set, so it only matches when
    exactly one value is expected. Comparison is case sensitive.
    """

    expected: frozenset[str]

    def __call__(self, ctx: VerifyContext) -> None:
        claim = ctx.get_claim(self.in_header)
        json_type = type_of(claim)
        if json_type is JSONType.STRING:
            if self.expected != {claim.as_string()}:
                raise self._fail(ctx, ErrorKind.AUDIENCE_MISMATCH)
        elif json_type is JSONType.ARRAY:
            if not self.expected <= _string_members(claim):
                raise self._fail(ctx, ErrorKind.AUDIENCE_MISMATCH)
        else:
            raise self._fail(ctx, ErrorKind.CLAIM_TYPE_MISMATCH)


class InsensitiveStringClaim(_BaseCheck):
    """String claim compared after Unicode case folding."""

    expected: str

    def __call__(self, ctx: VerifyContext) -> None:
        claim = ctx.get_claim(self.in_header, JSONType.STRING)
        if claim.as_string().casefold() != self.expected.casefold():
            raise self._fail(ctx, ErrorKind.CLAIM_VALUE_MISMATCH)


def _string_members(claim: Claim) -> frozenset[str]:
    """Return the string elements of an array claim; others never match."""
    backend = claim.backend
    return frozenset(
        backend.as_string(item)
        for item in claim.as_array()
        if type_of(Claim(item, backend)) is JSONType.STRING
    )
