"""Tests for the built-in claim checks."""

from datetime import UTC, datetime
from typing import Any

import pytest
from pydantic import ValidationError

from jwtkit.claims.backend import JSONType
from jwtkit.claims.claim import Claim
from jwtkit.core.errors import ErrorKind, TokenVerificationError
from jwtkit.crypto.algorithms import NoneAlgorithm
from jwtkit.token.builder import create
from jwtkit.token.decoder import DecodedJWT, decode
from jwtkit.verify.checks import (
    DateAfterClaim,
    DateBeforeClaim,
    EqualsClaim,
    InsensitiveStringClaim,
    IsSubsetClaim,
    VerifyContext,
)

NOW = 1_700_000_000
LEEWAY = 30


def _token(payload: dict[str, Any], header: dict[str, Any] | None = None) -> DecodedJWT:
    builder = create()
    for name, value in payload.items():
        builder.set_payload_claim(name, Claim.from_native(value))
    for name, value in (header or {}).items():
        builder.set_header_claim(name, Claim.from_native(value))
    return decode(builder.sign(NoneAlgorithm()))


def _context(
    claim_key: str,
    payload: dict[str, Any],
    header: dict[str, Any] | None = None,
    leeway: int = 0,
) -> VerifyContext:
    return VerifyContext(
        current_time=datetime.fromtimestamp(NOW, tz=UTC),
        token=_token(payload, header),
        default_leeway=leeway,
        claim_key=claim_key,
    )


def _raw_context(claim_key: str, value: Any) -> VerifyContext:
    token = decode(create().set_payload_claim(claim_key, value).sign(NoneAlgorithm()))
    return VerifyContext(
        current_time=datetime.fromtimestamp(NOW, tz=UTC),
        token=token,
        claim_key=claim_key,
    )


def _fails(check: Any, ctx: VerifyContext) -> ErrorKind:
    with pytest.raises(TokenVerificationError) as exc_info:
        check(ctx)
    assert exc_info.value.claim == ctx.claim_key
    return exc_info.value.kind


class TestVerifyContext:
    """Tests for claim lookup through the context."""

    def test_missing(self) -> None:
        ctx = _context("iss", {})
        with pytest.raises(TokenVerificationError) as exc_info:
            ctx.get_claim()
        assert exc_info.value.kind is ErrorKind.MISSING_CLAIM
        assert exc_info.value.claim == "iss"

    def test_header_lookup(self) -> None:
        ctx = _context("typ", {}, header={"typ": "JWT"})
        assert ctx.has_claim(in_header=True)
        assert not ctx.has_claim()
        assert ctx.get_claim(in_header=True).as_string() == "JWT"

    def test_frozen(self) -> None:
        ctx = _context("iss", {})
        with pytest.raises(ValidationError):
            ctx.claim_key = "sub"

    def test_null_is_type_mismatch(self) -> None:
        ctx = _raw_context("exp", None)
        assert ctx.get_claim().serialize() == "null"
        with pytest.raises(TokenVerificationError) as exc_info:
            ctx.get_claim(json_type=JSONType.INTEGER)
        assert exc_info.value.kind is ErrorKind.CLAIM_TYPE_MISMATCH


class TestEqualsClaim:
    """Tests for exact value checks."""

    def test_string(self) -> None:
        check = EqualsClaim(expected=Claim.from_native("https://issuer"))
        check(_context("iss", {"iss": "https://issuer"}))
        assert _fails(check, _context("iss", {"iss": "https://other"})) is (
            ErrorKind.CLAIM_VALUE_MISMATCH
        )

    def test_type_mismatch(self) -> None:
        check = EqualsClaim(expected=Claim.from_native(1))
        assert _fails(check, _context("n", {"n": 1.0})) is ErrorKind.CLAIM_TYPE_MISMATCH
        assert _fails(check, _context("n", {"n": "1"})) is ErrorKind.CLAIM_TYPE_MISMATCH

    def test_object_key_order(self) -> None:
        check = EqualsClaim(expected=Claim.from_native({"a": 1, "b": [True]}))
        check(_context("o", {"o": {"b": [True], "a": 1}}))

    def test_array_order(self) -> None:
        check = EqualsClaim(expected=Claim.from_native(["a", "b"]))
        kind = _fails(check, _context("l", {"l": ["b", "a"]}))
        assert kind is ErrorKind.CLAIM_VALUE_MISMATCH

    def test_missing(self) -> None:
        check = EqualsClaim(expected=Claim.from_native(True))
        assert _fails(check, _context("b", {})) is ErrorKind.MISSING_CLAIM

    def test_null_member(self) -> None:
        check = EqualsClaim(expected=Claim.from_native({"a": 1}))
        kind = _fails(check, _raw_context("o", {"a": None}))
        assert kind is ErrorKind.CLAIM_VALUE_MISMATCH


class TestDateBeforeClaim:
    """Tests for expiry checks."""

    def test_boundary_with_default_leeway(self) -> None:
        check = DateBeforeClaim()
        check(_context("exp", {"exp": NOW - LEEWAY}, leeway=LEEWAY))
        ctx = _context("exp", {"exp": NOW - LEEWAY - 1}, leeway=LEEWAY)
        assert _fails(check, ctx) is ErrorKind.TOKEN_EXPIRED

    def test_own_leeway_wins(self) -> None:
        check = DateBeforeClaim(leeway=LEEWAY)
        check(_context("exp", {"exp": NOW - LEEWAY}, leeway=0))

    def test_required(self) -> None:
        assert _fails(DateBeforeClaim(), _context("exp", {})) is ErrorKind.MISSING_CLAIM
        DateBeforeClaim(required=False)(_context("exp", {}))

    def test_not_an_integer(self) -> None:
        ctx = _context("exp", {"exp": "tomorrow"})
        kind = _fails(DateBeforeClaim(required=False), ctx)
        assert kind is ErrorKind.CLAIM_TYPE_MISMATCH


class TestDateAfterClaim:
    """Tests for not-before and issued-at checks."""

    def test_boundary(self) -> None:
        check = DateAfterClaim(leeway=LEEWAY)
        check(_context("nbf", {"nbf": NOW + LEEWAY}))
        ctx = _context("nbf", {"nbf": NOW + LEEWAY + 1})
        assert _fails(check, ctx) is ErrorKind.TOKEN_EXPIRED

    def test_past_passes(self) -> None:
        DateAfterClaim()(_context("iat", {"iat": NOW - 3600}))


class TestIsSubsetClaim:
    """Tests for audience-style set checks."""

    @pytest.mark.parametrize(
        ("aud", "expected", "passes"),
        [
            ("x", {"x"}, True),
            ("x", {"x", "y"}, False),
            ("x", {"y"}, False),
            (["x", "y"], {"x"}, True),
            (["x", "y"], {"x", "y"}, True),
            (["x"], {"x", "y"}, False),
            (["x", 1], {"x"}, True),
            ([1], {"1"}, False),
        ],
    )
    def test_membership(self, aud: Any, expected: set[str], passes: bool) -> None:
        check = IsSubsetClaim(expected=frozenset(expected))
        ctx = _context("aud", {"aud": aud})
        if passes:
            check(ctx)
        else:
            assert _fails(check, ctx) is ErrorKind.AUDIENCE_MISMATCH

    def test_case_sensitive(self) -> None:
        check = IsSubsetClaim(expected=frozenset({"API"}))
        assert _fails(check, _context("aud", {"aud": "api"})) is (
            ErrorKind.AUDIENCE_MISMATCH
        )

    def test_wrong_type(self) -> None:
        check = IsSubsetClaim(expected=frozenset({"x"}))
        ctx = _context("aud", {"aud": {"x": True}})
        assert _fails(check, ctx) is ErrorKind.CLAIM_TYPE_MISMATCH


class TestInsensitiveStringClaim:
    """Tests for case-insensitive header checks."""

    @pytest.mark.parametrize("typ", ["JWT", "jwt", "Jwt"])
    def test_matches(self, typ: str) -> None:
        check = InsensitiveStringClaim(expected="JWT", in_header=True)
        check(_context("typ", {}, header={"typ": typ}))

    def test_case_folding(self) -> None:
        check = InsensitiveStringClaim(expected="STRASSE")
        check(_context("street", {"street": "straße"}))

    def test_mismatch(self) -> None:
        check = InsensitiveStringClaim(expected="JWT", in_header=True)
        ctx = _context("typ", {}, header={"typ": "at+jwt"})
        assert _fails(check, ctx) is ErrorKind.CLAIM_VALUE_MISMATCH

    def test_payload_claim_ignored(self) -> None:
        check = InsensitiveStringClaim(expected="JWT", in_header=True)
        ctx = _context("typ", {"typ": "JWT"})
        assert _fails(check, ctx) is ErrorKind.MISSING_CLAIM
