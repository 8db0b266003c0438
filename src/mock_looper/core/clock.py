"""Virtual clock for deterministic dispatch decisions."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import InvalidArgumentError


def check_non_negative(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"{name} must be an int, got {type(value).__name__}")
    if value < 0:
        raise InvalidArgumentError(f"{name} must be non-negative, got {value}")


@dataclass
class VirtualClock:
    """
    An integer clock that only moves when the test driver says so.

    Real elapsed time never changes ``now()``.  The unit is whatever the
    caller uses for delays (milliseconds by convention).
    """

    _current: int = 0

    def __post_init__(self) -> None:
        check_non_negative("start time", self._current)

    # -- public API ----------------------------------------------------------

    def now(self) -> int:
        """Return the current virtual time."""
        return self._current

    def advance(self, amount: int) -> int:
        """Move the clock forward by *amount* and return the new time.

        ``advance(0)`` is a no-op.  The clock never moves backwards.
        """
        check_non_negative("amount", amount)
        self._current += amount
        return self._current
