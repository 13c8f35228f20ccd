"""Tests for JSON Web Keys and key sets."""

import pytest

from jwtkit.core.errors import (
    BadCastError,
    ClaimNotPresentError,
    ErrorKind,
    InvalidJSONError,
)
from jwtkit.keys.jwk import JWK, JWKS, parse_jwk, parse_jwks

RSA_JWK = """{
    "kty": "RSA",
    "use": "sig",
    "key_ops": ["verify", "sign"],
    "alg": "RS256",
    "kid": "2011-04-29",
    "n": "0vx7agoebGcQSuuPiLJXZptN9nndrQmbXEps2aiAFbWhM78LhWx4cbbf",
    "e": "AQAB",
    "x5c": ["MIIDQjCCAiqgAwIBAgIGATz/FuLiMA0GCSqGSIb3DQEBBQUAMGIxCzAJ", "MIIE"],
    "x5u": "https://example.com/certs",
    "x5t": "NjVBRjY5MDlCMUIwNzU4RTA2QzZFMDQ4QzQ2MDAyQjVDNjk1RTM2Qg",
    "x5t#S256": "ZWQ2YzZlYTY0MjMzZjZmZjk0NDA0ZjE5MTY1OTU5NWE"
}"""

EC_JWK = (
    '{"kty": "EC", "crv": "P-256", "kid": "ec-1",'
    ' "x": "f83OJ3D2xF1Bg8vub9tLe1gHMzV76e8Tus9uPHvRVEU",'
    ' "y": "x_FEzRu9m36HLN_tue659LNpXW6pCyStikYjKIWI5a0"}'
)

JWKS_DOCUMENT = """{"keys": [
    {"kty": "oct", "kid": "1", "k": "first"},
    {"kty": "oct", "kid": "2", "k": "second"},
    {"kty": "oct", "kid": "1", "k": "duplicate"},
    {"kty": "oct", "k": "no-kid"},
    {"kty": "oct", "kid": 3, "k": "numeric-kid"}
]}"""


class TestJWK:
    """Tests for single key accessors."""

    def test_registered_parameters(self) -> None:
        jwk = parse_jwk(RSA_JWK)
        assert jwk.get_key_type() == "RSA"
        assert jwk.get_use() == "sig"
        assert jwk.get_key_operations() == {"sign", "verify"}
        assert jwk.get_algorithm() == "RS256"
        assert jwk.get_key_id() == "2011-04-29"
        assert jwk.get_x5u() == "https://example.com/certs"
        assert jwk.get_x5t().startswith("NjVB")
        assert jwk.get_x5t_sha256().startswith("ZWQ2")
        assert len(jwk.get_x5c()) == 2

    def test_has_parameters(self) -> None:
        jwk = parse_jwk(EC_JWK)
        assert jwk.has_key_type()
        assert jwk.has_curve()
        assert jwk.has_key_id()
        assert not jwk.has_use()
        assert not jwk.has_algorithm()
        assert not jwk.has_key_operations()
        assert not jwk.has_x5c()
        assert not jwk.has_x5u()
        assert not jwk.has_x5t()
        assert not jwk.has_x5t_sha256()
        assert jwk.get_curve() == "P-256"

    def test_key_specific_parameters(self) -> None:
        jwk = parse_jwk(RSA_JWK)
        assert jwk.has_jwk_claim("e")
        assert jwk.get_jwk_claim("e").as_string() == "AQAB"
        assert set(jwk.get_jwk_claims()) >= {"n", "e"}

    def test_x5c_key_value(self) -> None:
        jwk = parse_jwk(RSA_JWK)
        assert jwk.get_x5c_key_value().startswith("MIIDQjCC")

    def test_empty_x5c(self) -> None:
        jwk = parse_jwk('{"kty": "RSA", "x5c": []}')
        with pytest.raises(ClaimNotPresentError):
            jwk.get_x5c_key_value()

    def test_missing_parameter(self) -> None:
        with pytest.raises(ClaimNotPresentError):
            parse_jwk(EC_JWK).get_algorithm()

    def test_empty(self) -> None:
        assert parse_jwk("{}").empty()
        assert not parse_jwk(EC_JWK).empty()

    def test_unknown_parameters_kept(self) -> None:
        jwk = parse_jwk('{"kty": "oct", "ext": true}')
        assert jwk.serialize() == '{"kty":"oct","ext":true}'

    def test_not_an_object(self) -> None:
        with pytest.raises(InvalidJSONError):
            parse_jwk('["kty"]')
        with pytest.raises(BadCastError):
            JWK("kty")


class TestJWKS:
    """Tests for key sets."""

    def test_parse(self) -> None:
        jwks = parse_jwks(JWKS_DOCUMENT)
        assert len(jwks) == 5
        assert [jwk.has_key_id() for jwk in jwks] == [True, True, True, False, True]
        assert jwks[1].get_key_id() == "2"

    def test_first_match_wins(self) -> None:
        jwks = parse_jwks(JWKS_DOCUMENT)
        assert jwks.has_jwk("1")
        assert jwks.get_jwk("1").get_jwk_claim("k").as_string() == "first"
        assert jwks.get_jwk("2").get_jwk_claim("k").as_string() == "second"

    def test_unknown_kid(self) -> None:
        jwks = parse_jwks(JWKS_DOCUMENT)
        assert not jwks.has_jwk("4")
        with pytest.raises(ClaimNotPresentError) as exc_info:
            jwks.get_jwk("4")
        assert exc_info.value.kind is ErrorKind.CLAIM_NOT_PRESENT

    def test_keys_without_string_kid_never_match(self) -> None:
        jwks = parse_jwks(JWKS_DOCUMENT)
        assert not jwks.has_jwk("")
        assert not jwks.has_jwk("3")

    @pytest.mark.parametrize(
        "text",
        ['{"keys": {}}', '{"keys": null}', '{"other": []}', "[]", "{"],
    )
    def test_invalid_document(self, text: str) -> None:
        with pytest.raises(InvalidJSONError):
            parse_jwks(text)

    def test_non_object_key(self) -> None:
        with pytest.raises(BadCastError):
            JWKS.parse('{"keys": ["not a key"]}')

    def test_empty_set(self) -> None:
        jwks = JWKS.parse('{"keys": []}')
        assert len(jwks) == 0
        assert list(jwks) == []
