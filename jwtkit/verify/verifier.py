"""Signature and claim verification of decoded tokens."""

from collections.abc import Iterable
from typing import Self

from structlog.stdlib import BoundLogger

from jwtkit.claims.backend import JSONType
from jwtkit.claims.claim import Claim
from jwtkit.core.errors import (
    BadCastError,
    ErrorKind,
    SignatureVerificationError,
    TokenVerificationError,
)
from jwtkit.core.logging import get_logger
from jwtkit.core.settings import VerifierSettings
from jwtkit.crypto.algorithms import Algorithm
from jwtkit.token.decoder import DecodedJWT
from jwtkit.verify.checks import (
    ClaimCheck,
    DateAfterClaim,
    DateBeforeClaim,
    EqualsClaim,
    InsensitiveStringClaim,
    IsSubsetClaim,
    VerifyContext,
    type_of,
)
from jwtkit.verify.clock import Clock, SystemClock

__all__ = ["Verifier"]


class Verifier:
    """Checks the signature and claims of a decoded token.

    Only algorithms registered with `allow_algorithm` are accepted; the
    token's own ``alg`` header merely selects among them. Claim checks run
    in the order they were first registered, starting with the optional
    ``exp``, ``iat`` and ``nbf`` checks, and verification stops at the
    first failure. Setting a per-claim leeway makes that claim required.
    """

    def __init__(
        self,
        clock: Clock | None = None,
        *,
        logger: BoundLogger | None = None,
    ) -> None:
        self._clock = clock or SystemClock()
        self._logger = logger or get_logger()
        self._default_leeway = 0
        self._algorithms: dict[str, Algorithm] = {}
        self._checks: dict[str, ClaimCheck] = {
            "exp": DateBeforeClaim(required=False),
            "iat": DateAfterClaim(required=False),
            "nbf": DateAfterClaim(required=False),
        }

    @classmethod
    def from_settings(
        cls,
        settings: VerifierSettings,
        clock: Clock | None = None,
        *,
        logger: BoundLogger | None = None,
    ) -> Self:
        """Build a verifier with the checks described by settings.

        Algorithms are not part of the settings and still have to be
        allowed explicitly.
        """
        verifier = cls(clock, logger=logger).leeway(settings.leeway)
        if settings.expires_at_leeway is not None:
            verifier.expires_at_leeway(settings.expires_at_leeway)
        if settings.not_before_leeway is not None:
            verifier.not_before_leeway(settings.not_before_leeway)
        if settings.issued_at_leeway is not None:
            verifier.issued_at_leeway(settings.issued_at_leeway)
        if settings.issuer is not None:
            verifier.with_issuer(settings.issuer)
        if settings.subject is not None:
            verifier.with_subject(settings.subject)
        if settings.audience:
            verifier.with_audience(settings.audience)
        if settings.type is not None:
            verifier.with_type(settings.type)
        return verifier

    def leeway(self, seconds: int) -> Self:
        """Set the leeway used by checks that do not carry their own."""
        self._default_leeway = seconds
        return self

    def expires_at_leeway(self, seconds: int) -> Self:
        self._checks["exp"] = DateBeforeClaim(leeway=seconds)
        return self

    def not_before_leeway(self, seconds: int) -> Self:
        self._checks["nbf"] = DateAfterClaim(leeway=seconds)
        return self

    def issued_at_leeway(self, seconds: int) -> Self:
        self._checks["iat"] = DateAfterClaim(leeway=seconds)
        return self

    def with_type(self, typ: str) -> Self:
        """Require the ``typ`` header, compared case-insensitively."""
        check = InsensitiveStringClaim(expected=typ, in_header=True)
        return self.with_claim("typ", check)

    def with_issuer(self, iss: str) -> Self:
        return self.with_claim("iss", Claim.from_native(iss))

    def with_subject(self, sub: str) -> Self:
        return self.with_claim("sub", Claim.from_native(sub))

    def with_audience(self, aud: str | Iterable[str]) -> Self:
        """Require every given audience to be present in ``aud``."""
        expected = frozenset({aud}) if isinstance(aud, str) else frozenset(aud)
        return self.with_claim("aud", IsSubsetClaim(expected=expected))

    def with_id(self, jti: str) -> Self:
        return self.with_claim("jti", Claim.from_native(jti))

    def with_claim(self, name: str, check: ClaimCheck | Claim) -> Self:
        """Install a check for a claim, replacing any existing one.

        A `Claim` installs an equality check against that value.
        """
        if isinstance(check, Claim):
            check = EqualsClaim(expected=check)
        self._checks[name] = check
        return self

    def allow_algorithm(self, algorithm: Algorithm) -> Self:
        """Accept tokens signed with this algorithm."""
        self._algorithms[algorithm.name()] = algorithm
        return self

    def check(self, token: DecodedJWT) -> TokenVerificationError | None:
        """Verify a token and return the first error instead of raising."""
        error = self._run(token)
        if error is None:
            self._logger.debug("Verified token", alg=token.get_algorithm())
        else:
            self._logger.info(
                "Token failed verification",
                error=error.kind.value,
                alg=_header_alg(token),
                claim=error.claim,
            )
        return error

    def verify(self, token: DecodedJWT) -> None:
        """Verify a token, raising TokenVerificationError on the first failure."""
        error = self.check(token)
        if error is not None:
            raise error

    def _run(self, token: DecodedJWT) -> TokenVerificationError | None:
        algorithm = self._algorithm_for(token)
        if algorithm is None:
            return TokenVerificationError(ErrorKind.WRONG_ALGORITHM, claim="alg")
        try:
            algorithm.verify(token.signing_input, token.signature)
        except SignatureVerificationError as e:
            error = TokenVerificationError(ErrorKind.SIGNATURE_INVALID, str(e))
            error.__cause__ = e
            return error

        ctx = VerifyContext(
            current_time=self._clock.now(),
            token=token,
            default_leeway=self._default_leeway,
        )
        for name, check in self._checks.items():
            try:
                check(ctx.model_copy(update={"claim_key": name}))
            except TokenVerificationError as e:
                return e
            except BadCastError as e:
                error = TokenVerificationError(
                    ErrorKind.CLAIM_TYPE_MISMATCH, str(e), claim=name
                )
                error.__cause__ = e
                return error
        return None

    def _algorithm_for(self, token: DecodedJWT) -> Algorithm | None:
        if not token.has_algorithm():
            return None
        alg = token.get_header_claim("alg")
        if type_of(alg) is not JSONType.STRING:
            return None
        return self._algorithms.get(alg.as_string())


def _header_alg(token: DecodedJWT) -> str | None:
    if not token.has_algorithm():
        return None
    alg = token.get_header_claim("alg")
    if type_of(alg) is JSONType.STRING:
        return alg.as_string()
    return alg.serialize()
