"""JSON capability contract and the default pydantic_core backend.

Everything above this module handles JSON values only through a
`JSONBackend`, so claims, tokens and key sets work with any JSON
representation that implements the contract.
"""

import copy
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping, Set
from enum import StrEnum
from typing import Any

import pydantic_core

from jwtkit.core.errors import BadCastError, InvalidJSONError


class JSONType(StrEnum):
    """Runtime type of a JSON value."""

    BOOLEAN = "boolean"
    INTEGER = "integer"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


class JSONBackend(ABC):
    """Operations a JSON implementation must provide.

    Values are opaque to the rest of the library. Objects are unique-keyed
    string to value mappings and arrays are sequences of values.
    """

    @abstractmethod
    def get_type(self, value: Any) -> JSONType:
        """Return the JSON type of a value."""

    @abstractmethod
    def as_object(self, value: Any) -> dict[str, Any]:
        """Return the members of an object value."""

    @abstractmethod
    def as_array(self, value: Any) -> list[Any]:
        """Return the elements of an array value."""

    @abstractmethod
    def as_string(self, value: Any) -> str:
        """Return a string value."""

    @abstractmethod
    def as_int(self, value: Any) -> int:
        """Return an integer value."""

    @abstractmethod
    def as_bool(self, value: Any) -> bool:
        """Return a boolean value."""

    @abstractmethod
    def as_number(self, value: Any) -> float:
        """Return a number value."""

    @abstractmethod
    def parse(self, text: str) -> Any:
        """Parse JSON text, raising InvalidJSONError on failure."""

    @abstractmethod
    def serialize(self, value: Any) -> str:
        """Serialize a value to compact JSON text."""

    @abstractmethod
    def make_string(self, value: str) -> Any:
        """Build a string value."""

    @abstractmethod
    def make_integer(self, value: int) -> Any:
        """Build an integer value."""

    @abstractmethod
    def make_number(self, value: float) -> Any:
        """Build a number value."""

    @abstractmethod
    def make_bool(self, value: bool) -> Any:
        """Build a boolean value."""

    @abstractmethod
    def make_array(self, items: Iterable[Any]) -> Any:
        """Build an array value from backend values."""

    @abstractmethod
    def make_object(self, members: Mapping[str, Any]) -> Any:
        """Build an object value from backend values."""

    def from_native(self, obj: object) -> Any:
        """Convert plain Python data into a backend value.

        Sets become sorted arrays so the result does not depend on hash
        order.
        """
        if isinstance(obj, bool):
            return self.make_bool(obj)
        if isinstance(obj, int):
            return self.make_integer(obj)
        if isinstance(obj, float):
            return self.make_number(obj)
        if isinstance(obj, str):
            return self.make_string(obj)
        if isinstance(obj, Mapping):
            return self.make_object(
                {str(key): self.from_native(item) for key, item in obj.items()}
            )
        if isinstance(obj, Set):
            return self.make_array(self.from_native(item) for item in sorted(obj))
        if isinstance(obj, list | tuple):
            return self.make_array(self.from_native(item) for item in obj)
        msg = f"cannot convert {type(obj).__name__} to a JSON value"
        raise BadCastError(msg)


class PydanticJSONBackend(JSONBackend):
    """Backend whose values are plain Python objects.

    Parsing and serialization go through pydantic_core. Containers are
    copied on the way in and out so values held by a claim stay private.
    """

    def get_type(self, value: Any) -> JSONType:
        if isinstance(value, bool):
            return JSONType.BOOLEAN
        if isinstance(value, int):
            return JSONType.INTEGER
        if isinstance(value, float):
            return JSONType.NUMBER
        if isinstance(value, str):
            return JSONType.STRING
        if isinstance(value, list):
            return JSONType.ARRAY
        if isinstance(value, dict):
            return JSONType.OBJECT
        msg = f"unsupported JSON value of type {type(value).__name__}"
        raise BadCastError(msg)

    def as_object(self, value: Any) -> dict[str, Any]:
        if not isinstance(value, dict):
            raise BadCastError("value is not a JSON object")
        return copy.deepcopy(value)

    def as_array(self, value: Any) -> list[Any]:
        if not isinstance(value, list):
            raise BadCastError("value is not a JSON array")
        return copy.deepcopy(value)

    def as_string(self, value: Any) -> str:
        if not isinstance(value, str):
            raise BadCastError("value is not a JSON string")
        return value

    def as_int(self, value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise BadCastError("value is not a JSON integer")
        return value

    def as_bool(self, value: Any) -> bool:
        if not isinstance(value, bool):
            raise BadCastError("value is not a JSON boolean")
        return value

    def as_number(self, value: Any) -> float:
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise BadCastError("value is not a JSON number")
        return float(value)

    def parse(self, text: str) -> Any:
        try:
            return pydantic_core.from_json(text, allow_inf_nan=False)
        except ValueError as e:
            raise InvalidJSONError(f"invalid json: {e}") from e

    def serialize(self, value: Any) -> str:
        return pydantic_core.to_json(value).decode()

    def make_string(self, value: str) -> Any:
        return str(value)

    def make_integer(self, value: int) -> Any:
        return int(value)

    def make_number(self, value: float) -> Any:
        return float(value)

    def make_bool(self, value: bool) -> Any:
        return bool(value)

    def make_array(self, items: Iterable[Any]) -> Any:
        return [copy.deepcopy(item) for item in items]

    def make_object(self, members: Mapping[str, Any]) -> Any:
        return {key: copy.deepcopy(item) for key, item in members.items()}


def canonical_json(backend: JSONBackend, value: Any) -> str:
    """Serialize a value with object members sorted by key.

    Two values are equal as JSON exactly when their canonical forms match.
    """
    json_type = backend.get_type(value)
    if json_type is JSONType.OBJECT:
        members = backend.as_object(value)
        parts = [
            backend.serialize(backend.make_string(key))
            + ":"
            + canonical_json(backend, members[key])
            for key in sorted(members)
        ]
        return "{" + ",".join(parts) + "}"
    if json_type is JSONType.ARRAY:
        items = backend.as_array(value)
        return "[" + ",".join(canonical_json(backend, item) for item in items) + "]"
    return backend.serialize(value)


_default_backend = PydanticJSONBackend()


def default_backend() -> JSONBackend:
    """Return the shared default backend."""
    return _default_backend
