"""Named accessors for registered header and payload claims (RFC 7519)."""

from datetime import datetime

from jwtkit.claims.backend import JSONType
from jwtkit.claims.claim import Claim
from jwtkit.claims.claim_map import ClaimMap


class PayloadClaims:
    """Registered payload claims layered over a claim map.

    Getters raise `ClaimNotPresentError` for a missing claim and
    `BadCastError` for a claim of the wrong type.
    """

    payload_claims: ClaimMap

    def has_issuer(self) -> bool:
        return self.has_payload_claim("iss")

    def has_subject(self) -> bool:
        return self.has_payload_claim("sub")

    def has_audience(self) -> bool:
        return self.has_payload_claim("aud")

    def has_expires_at(self) -> bool:
        return self.has_payload_claim("exp")

    def has_not_before(self) -> bool:
        return self.has_payload_claim("nbf")

    def has_issued_at(self) -> bool:
        return self.has_payload_claim("iat")

    def has_id(self) -> bool:
        return self.has_payload_claim("jti")

    def get_issuer(self) -> str:
        return self.get_payload_claim("iss").as_string()

    def get_subject(self) -> str:
        return self.get_payload_claim("sub").as_string()

    def get_audience(self) -> frozenset[str]:
        """Return the audience; a single string becomes a one-element set."""
        aud = self.get_payload_claim("aud")
        if aud.get_type() is JSONType.STRING:
            return frozenset({aud.as_string()})
        return aud.as_set()

    def get_expires_at(self) -> datetime:
        return self.get_payload_claim("exp").as_date()

    def get_not_before(self) -> datetime:
        return self.get_payload_claim("nbf").as_date()

    def get_issued_at(self) -> datetime:
        return self.get_payload_claim("iat").as_date()

    def get_id(self) -> str:
        return self.get_payload_claim("jti").as_string()

    def has_payload_claim(self, name: str) -> bool:
        return self.payload_claims.has_claim(name)

    def get_payload_claim(self, name: str) -> Claim:
        return self.payload_claims.get_claim(name)

    def get_payload_claims(self) -> dict[str, Claim]:
        return self.payload_claims.get_claims()


class HeaderClaims:
    """Registered JOSE header parameters layered over a claim map."""

    header_claims: ClaimMap

    def has_algorithm(self) -> bool:
        return self.has_header_claim("alg")

    def has_type(self) -> bool:
        return self.has_header_claim("typ")

    def has_content_type(self) -> bool:
        return self.has_header_claim("cty")

    def has_key_id(self) -> bool:
        return self.has_header_claim("kid")

    def get_algorithm(self) -> str:
        return self.get_header_claim("alg").as_string()

    def get_type(self) -> str:
        return self.get_header_claim("typ").as_string()

    def get_content_type(self) -> str:
        return self.get_header_claim("cty").as_string()

    def get_key_id(self) -> str:
        return self.get_header_claim("kid").as_string()

    def has_header_claim(self, name: str) -> bool:
        return self.header_claims.has_claim(name)

    def get_header_claim(self, name: str) -> Claim:
        return self.header_claims.get_claim(name)

    def get_header_claims(self) -> dict[str, Claim]:
        return self.header_claims.get_claims()
