"""A single JSON value held as a token claim."""

from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any, Self

from jwtkit.claims.backend import (
    JSONBackend,
    JSONType,
    canonical_json,
    default_backend,
)


class Claim:
    """Typed, read-only wrapper around one JSON value.

    Every accessor raises `jwtkit.core.errors.BadCastError` when the stored
    value has a different JSON type.
    """

    __slots__ = ("_backend", "_value")

    def __init__(self, value: Any, backend: JSONBackend | None = None) -> None:
        self._backend = backend or default_backend()
        self._value = value

    @classmethod
    def from_native(cls, obj: object, backend: JSONBackend | None = None) -> Self:
        """Build a claim from plain Python data."""
        backend = backend or default_backend()
        return cls(backend.from_native(obj), backend)

    @classmethod
    def from_date(cls, when: datetime, backend: JSONBackend | None = None) -> Self:
        """Build an integer claim holding Unix seconds."""
        backend = backend or default_backend()
        return cls(backend.make_integer(int(when.timestamp())), backend)

    @classmethod
    def from_set(
        cls, values: Iterable[str], backend: JSONBackend | None = None
    ) -> Self:
        """Build an array claim from strings, sorted and deduplicated."""
        backend = backend or default_backend()
        items = [backend.make_string(v) for v in sorted(set(values))]
        return cls(backend.make_array(items), backend)

    @property
    def backend(self) -> JSONBackend:
        return self._backend

    def to_json(self) -> Any:
        """Return a copy of the wrapped JSON value."""
        json_type = self.get_type()
        if json_type is JSONType.OBJECT:
            return self._backend.make_object(self._backend.as_object(self._value))
        if json_type is JSONType.ARRAY:
            return self._backend.make_array(self._backend.as_array(self._value))
        return self._value

    def get_type(self) -> JSONType:
        return self._backend.get_type(self._value)

    def as_string(self) -> str:
        return self._backend.as_string(self._value)

    def as_int(self) -> int:
        return self._backend.as_int(self._value)

    def as_bool(self) -> bool:
        return self._backend.as_bool(self._value)

    def as_number(self) -> float:
        return self._backend.as_number(self._value)

    def as_array(self) -> list[Any]:
        return self._backend.as_array(self._value)

    def as_date(self) -> datetime:
        """Return an integer claim as a UTC datetime."""
        return datetime.fromtimestamp(self.as_int(), tz=UTC)

    def as_set(self) -> frozenset[str]:
        """Return an array of strings as a set."""
        return frozenset(self._backend.as_string(e) for e in self.as_array())

    def serialize(self) -> str:
        return self._backend.serialize(self._value)

    def canonical(self) -> str:
        """Return the serialization with object members sorted by key."""
        return canonical_json(self._backend, self._value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Claim):
            return NotImplemented
        return (
            self.get_type() == other.get_type()
            and self.canonical() == other.canonical()
        )

    def __hash__(self) -> int:
        return hash((self.get_type(), self.canonical()))

    def __str__(self) -> str:
        return self.serialize()

    def __repr__(self) -> str:
        return f"Claim({self.serialize()})"
