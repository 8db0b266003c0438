"""Recording handler: captures every delivered message for later checks."""

from __future__ import annotations

import threading
from typing import Any, Callable

from ..core.looper import Handler, MockLooper
from ..core.results import DispatchRecord


class RecordingHandler(Handler):
    """
    A :class:`Handler` that logs each delivery with its virtual time and
    the name of the thread that delivered it.

    Safe to read from the test thread while auto-dispatch is running.
    """

    def __init__(
        self,
        looper: MockLooper,
        callback: Callable[[Any], Any] | None = None,
    ) -> None:
        super().__init__(looper, callback)
        self._lock = threading.Lock()
        self._records: list[DispatchRecord] = []

    def handle_message(self, tag: Any) -> None:
        record = DispatchRecord(
            tag=tag,
            virtual_time=self.looper.now(),
            thread_name=threading.current_thread().name,
        )
        with self._lock:
            self._records.append(record)
        super().handle_message(tag)

    @property
    def records(self) -> list[DispatchRecord]:
        with self._lock:
            return list(self._records)

    @property
    def tags(self) -> list[Any]:
        return [r.tag for r in self.records]

    def reset(self) -> None:
        """Clear the dispatch log."""
        with self._lock:
            self._records.clear()
