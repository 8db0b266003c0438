"""Background thread that dispatches due messages until told to stop."""

from __future__ import annotations

import logging
import threading
from typing import Callable

from .config import LooperConfig

logger = logging.getLogger(__name__)


class AutoDispatchWorker(threading.Thread):
    """
    Repeatedly drains due messages on its own thread.

    The worker never moves virtual time.  When nothing is due it waits on
    the looper's condition for at most ``config.idle_wait_s`` seconds.
    After a stop request it drains once more, so anything due at that
    moment is delivered before :meth:`join` returns.
    """

    def __init__(
        self,
        condition: threading.Condition,
        drain: Callable[[Callable[[], None]], int],
        has_due: Callable[[], bool],
        config: LooperConfig,
    ) -> None:
        super().__init__(name=config.thread_name, daemon=True)
        self._cond = condition
        self._drain = drain
        self._has_due = has_due
        self._idle_wait_s = config.idle_wait_s
        self._stop_requested = False
        self.dispatched = 0
        self.error: BaseException | None = None

    def run(self) -> None:
        try:
            while True:
                self._drain(self._count_one)
                with self._cond:
                    if self._stop_requested:
                        break
                    if not self._has_due():
                        self._cond.wait(self._idle_wait_s)
            self._drain(self._count_one)
        except BaseException as exc:
            logger.exception("Auto-dispatch stopped by handler error")
            self.error = exc
        logger.debug("Auto-dispatch thread exiting after %d message(s)", self.dispatched)

    def _count_one(self) -> None:
        self.dispatched += 1

    def request_stop(self) -> None:
        with self._cond:
            self._stop_requested = True
            self._cond.notify_all()
