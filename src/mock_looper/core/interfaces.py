"""Protocol definitions and core data types for the mock looper."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Callable, Hashable, Protocol, runtime_checkable


# ---------------------------------------------------------------------------
# Core data types
# ---------------------------------------------------------------------------

@dataclass(order=True, frozen=True)
class ScheduledMessage:
    """A queued message, ordered by due time then enqueue sequence."""

    due_time: int
    sequence: int  # FIFO tie-breaker for equal due times
    tag: Hashable = field(compare=False, default=None)
    target: MessageTarget | None = field(compare=False, default=None, repr=False)
    callback: Callable[[], Any] | None = field(compare=False, default=None, repr=False)

    def is_due(self, now: int) -> bool:
        return self.due_time <= now


class AutoDispatchState(str, enum.Enum):
    IDLE = "idle"
    RUNNING = "running"


# ---------------------------------------------------------------------------
# Abstract base / protocol definitions
# ---------------------------------------------------------------------------

@runtime_checkable
class MessageTarget(Protocol):
    """
    The handling capability a dispatched message is delivered to.

    The looper calls ``handle_message`` once per message, on whichever
    thread performs the dispatch, and never concurrently with itself.
    """

    def handle_message(self, tag: Any) -> None:
        """Handle a single dispatched message."""
        ...
