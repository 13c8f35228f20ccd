"""Read-only collection of named claims parsed from a JSON object."""

from collections.abc import Iterator, Mapping
from typing import Any, Self

from jwtkit.claims.backend import JSONBackend, default_backend
from jwtkit.claims.claim import Claim
from jwtkit.core.errors import BadCastError, ClaimNotPresentError, InvalidJSONError


class ClaimMap(Mapping[str, Claim]):
    """Claims keyed by name.

    Built once from the members of a JSON object and never modified
    afterwards; the members are copied on construction.
    """

    __slots__ = ("_backend", "_members")

    def __init__(
        self,
        members: Mapping[str, Any] | None = None,
        backend: JSONBackend | None = None,
    ) -> None:
        self._backend = backend or default_backend()
        self._members: dict[str, Any] = dict(members or {})

    @classmethod
    def parse(cls, text: str, backend: JSONBackend | None = None) -> Self:
        """Parse JSON text that must hold an object."""
        backend = backend or default_backend()
        value = backend.parse(text)
        try:
            members = backend.as_object(value)
        except BadCastError as e:
            raise InvalidJSONError("invalid json: expected an object") from e
        return cls(members, backend)

    @property
    def backend(self) -> JSONBackend:
        return self._backend

    def has_claim(self, name: str) -> bool:
        return name in self._members

    def get_claim(self, name: str) -> Claim:
        """Return the claim stored under a name."""
        if name not in self._members:
            raise ClaimNotPresentError(f"claim not found: {name}")
        return Claim(self._members[name], self._backend)

    def get_claims(self) -> dict[str, Claim]:
        """Return a snapshot of every claim."""
        return {
            name: Claim(value, self._backend) for name, value in self._members.items()
        }

    def to_json(self) -> Any:
        """Return the claims as a backend object value."""
        return self._backend.make_object(self._members)

    def serialize(self) -> str:
        return self._backend.serialize(self.to_json())

    def __getitem__(self, name: str) -> Claim:
        return self.get_claim(name)

    def __iter__(self) -> Iterator[str]:
        return iter(self._members)

    def __len__(self) -> int:
        return len(self._members)

    def __contains__(self, name: object) -> bool:
        return name in self._members

    def __repr__(self) -> str:
        return f"ClaimMap({self.serialize()})"
