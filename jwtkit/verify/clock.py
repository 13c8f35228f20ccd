"""Time sources for token verification."""

from abc import ABC, abstractmethod
from datetime import UTC, datetime
from typing import Self


class Clock(ABC):
    """Source of the current time."""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current time as an aware datetime."""


class SystemClock(Clock):
    """Wall-clock time in UTC."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class FixedClock(Clock):
    """A clock stopped at one instant, for tests and offline checks."""

    def __init__(self, at: datetime) -> None:
        if at.tzinfo is None:
            at = at.replace(tzinfo=UTC)
        self._at = at

    @classmethod
    def at_timestamp(cls, seconds: float) -> Self:
        """Stop the clock at a Unix timestamp."""
        return cls(datetime.fromtimestamp(seconds, tz=UTC))

    def now(self) -> datetime:
        return self._at
