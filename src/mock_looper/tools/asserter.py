"""Dispatch assertion helpers for verifying message delivery."""

from __future__ import annotations

from typing import Any

from .recorder import RecordingHandler


class DispatchAssertionError(AssertionError):
    """Assertion failure carrying the observed dispatch log."""

    def __init__(self, message: str, tags: list[Any]) -> None:
        super().__init__(f"{message}.  Dispatched: {tags}")
        self.tags = tags


class DispatchAsserter:
    """
    Convenience wrapper around a ``RecordingHandler`` for writing
    expressive assertions in tests.
    """

    def __init__(self, recorder: RecordingHandler) -> None:
        self.recorder = recorder

    @property
    def tags(self) -> list[Any]:
        return self.recorder.tags

    def assert_dispatched(self, *tags: Any) -> None:
        """Assert the delivered tags are exactly *tags*, in order."""
        actual = self.tags
        if actual != list(tags):
            raise DispatchAssertionError(f"Expected dispatch sequence {list(tags)}", actual)

    def assert_nothing_dispatched(self) -> None:
        actual = self.tags
        if actual:
            raise DispatchAssertionError("Expected no dispatches", actual)

    def assert_not_dispatched(self, tag: Any) -> None:
        """Assert *tag* was **not** delivered."""
        actual = self.tags
        if tag in actual:
            raise DispatchAssertionError(
                f"Expected {tag!r} NOT to be dispatched, "
                f"but it was dispatched {actual.count(tag)} time(s)",
                actual,
            )

    def assert_call_order(self, *tags: Any) -> None:
        """Assert *tags* were delivered in this relative order (gaps allowed)."""
        actual = self.tags
        idx = 0
        for expected in tags:
            while idx < len(actual) and actual[idx] != expected:
                idx += 1
            if idx == len(actual):
                raise DispatchAssertionError(f"Expected dispatch order {list(tags)}", actual)
            idx += 1

    def assert_dispatched_times(self, tag: Any, times: int) -> None:
        """Assert *tag* was delivered exactly *times* times."""
        actual = self.tags
        count = actual.count(tag)
        if count != times:
            raise DispatchAssertionError(
                f"Expected {tag!r} to be dispatched {times} time(s), "
                f"but it was dispatched {count} time(s)",
                actual,
            )
