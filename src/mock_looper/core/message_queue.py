"""Ordered store of pending messages, keyed by (due_time, sequence)."""

from __future__ import annotations

import heapq
from typing import Any, Callable, Hashable, Iterator

from .clock import check_non_negative
from .errors import InvalidArgumentError
from .interfaces import MessageTarget, ScheduledMessage


class MessageQueue:
    """
    Priority queue of :class:`ScheduledMessage` entries.

    Not thread safe on its own; :class:`MockLooper` guards it together with
    the clock.
    """

    def __init__(self) -> None:
        self._heap: list[ScheduledMessage] = []
        self._seq = 0

    def __len__(self) -> int:
        return len(self._heap)

    # -- enqueue -------------------------------------------------------------

    def enqueue(
        self,
        tag: Hashable,
        delay: int,
        now: int,
        target: MessageTarget | None = None,
        callback: Callable[[], Any] | None = None,
    ) -> ScheduledMessage:
        """Queue *tag* to become due *delay* units after *now*."""
        check_non_negative("delay", delay)
        return self.enqueue_at(tag, now + delay, target=target, callback=callback)

    def enqueue_at(
        self,
        tag: Hashable,
        due_time: int,
        target: MessageTarget | None = None,
        callback: Callable[[], Any] | None = None,
    ) -> ScheduledMessage:
        """Queue *tag* at an absolute due time.

        A due time in the past is allowed; the message is immediately due.
        """
        if isinstance(due_time, bool) or not isinstance(due_time, int):
            raise InvalidArgumentError(
                f"due time must be an int, got {type(due_time).__name__}"
            )
        msg = ScheduledMessage(
            due_time=due_time,
            sequence=self._seq,
            tag=tag,
            target=target,
            callback=callback,
        )
        self._seq += 1
        heapq.heappush(self._heap, msg)
        return msg

    # -- draining ------------------------------------------------------------

    def pop_due(self, now: int) -> ScheduledMessage | None:
        """Remove and return the earliest message if it is due at *now*."""
        if self._heap and self._heap[0].is_due(now):
            return heapq.heappop(self._heap)
        return None

    def drain_due(self, now: int) -> Iterator[ScheduledMessage]:
        """Yield every message due at *now*, removing each as it is yielded.

        Messages queued while the generator is being consumed are picked up
        if they are due.
        """
        while (msg := self.pop_due(now)) is not None:
            yield msg

    # -- inspection ----------------------------------------------------------

    def next_due_time(self) -> int | None:
        return self._heap[0].due_time if self._heap else None

    def has_due(self, now: int) -> bool:
        return bool(self._heap) and self._heap[0].is_due(now)

    def has_tag(self, tag: Hashable, target: MessageTarget | None = None) -> bool:
        return any(self._matches(m, tag, target) for m in self._heap)

    # -- removal -------------------------------------------------------------

    def remove_tag(self, tag: Hashable, target: MessageTarget | None = None) -> int:
        """Drop every pending message with *tag* (and *target*, if given)."""
        kept = [m for m in self._heap if not self._matches(m, tag, target)]
        removed = len(self._heap) - len(kept)
        if removed:
            heapq.heapify(kept)
            self._heap = kept
        return removed

    def clear(self) -> int:
        removed = len(self._heap)
        self._heap.clear()
        return removed

    @staticmethod
    def _matches(
        msg: ScheduledMessage, tag: Hashable, target: MessageTarget | None
    ) -> bool:
        if msg.tag != tag:
            return False
        return target is None or msg.target is target
