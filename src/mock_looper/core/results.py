"""Result data structures for recording and querying dispatch outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Hashable


@dataclass
class AssertionResult:
    """Outcome of a single scenario check at a point in virtual time."""

    timestamp: int
    passed: bool
    description: str = ""
    expected: Any = None
    actual: Any = None
    details: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DispatchRecord:
    """Single delivered message."""

    tag: Hashable
    virtual_time: int
    thread_name: str = ""


@dataclass
class ScenarioResults:
    """
    Container for everything gathered during one scenario run.

    Provides convenience accessors for assertions in pytest.
    """

    name: str = ""
    assertions: list[AssertionResult] = field(default_factory=list)
    dispatched: list[DispatchRecord] = field(default_factory=list)
    final_time: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)

    # -- convenience ---------------------------------------------------------

    def add(self, timestamp: int, result: AssertionResult | dict) -> None:
        if isinstance(result, dict):
            result = AssertionResult(
                timestamp=timestamp,
                passed=result.get("passed", True),
                description=result.get("description", ""),
                expected=result.get("expected"),
                actual=result.get("actual"),
            )
        self.assertions.append(result)

    def all_passed(self) -> bool:
        return all(a.passed for a in self.assertions)

    @property
    def passed(self) -> bool:
        return self.all_passed()

    @property
    def failures(self) -> list[AssertionResult]:
        return [a for a in self.assertions if not a.passed]

    @property
    def dispatched_tags(self) -> list[Hashable]:
        return [r.tag for r in self.dispatched]
