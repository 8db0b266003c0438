"""Mock looper: virtual-time message dispatch for unit tests."""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, Hashable, Iterator

from .auto_dispatch import AutoDispatchWorker
from .clock import VirtualClock
from .config import LooperConfig
from .errors import IllegalStateError, InvalidArgumentError, UsageError
from .interfaces import AutoDispatchState, MessageTarget, ScheduledMessage
from .message_queue import MessageQueue

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Looper
# ---------------------------------------------------------------------------

class MockLooper:
    """
    A single-queue message scheduler driven by a virtual clock.

    Synchronous use: queue messages through a :class:`Handler`, call
    :meth:`move_time_forward` and :meth:`dispatch_all`.  Everything happens
    on the calling thread.

    Auto-dispatch: :meth:`start_auto_dispatch` spawns one background thread
    that delivers due messages as they appear; :meth:`stop_auto_dispatch`
    stops it, waits for it, and returns how many messages it delivered.

    Clock, queue and auto-dispatch state share one lock.  Handlers run
    outside it, so they may send further messages.
    """

    def __init__(
        self,
        config: LooperConfig | None = None,
        target: MessageTarget | None = None,
    ) -> None:
        self.config = config or LooperConfig()
        self.target = target  # used for messages queued without a target
        self._clock = VirtualClock(self.config.start_time)
        self._queue = MessageQueue()
        self._cond = threading.Condition(threading.RLock())
        self._dispatch_lock = threading.RLock()
        self._state = AutoDispatchState.IDLE
        self._worker: AutoDispatchWorker | None = None

    # -- clock ---------------------------------------------------------------

    def now(self) -> int:
        with self._cond:
            return self._clock.now()

    @property
    def current_time(self) -> int:
        return self.now()

    def move_time_forward(self, amount: int) -> int:
        """Advance virtual time by *amount*.  Nothing is dispatched."""
        with self._cond:
            now = self._clock.advance(amount)
            self._cond.notify_all()
        logger.debug("Virtual time moved forward by %d to %d", amount, now)
        return now

    # -- queueing ------------------------------------------------------------

    def enqueue(
        self,
        tag: Hashable,
        delay: int = 0,
        target: MessageTarget | None = None,
        callback: Callable[[], Any] | None = None,
    ) -> ScheduledMessage:
        """Queue *tag* for delivery *delay* units from now."""
        target = self._resolve_target(target, callback)
        with self._cond:
            msg = self._queue.enqueue(
                tag, delay, self._clock.now(), target=target, callback=callback
            )
            self._cond.notify_all()
        return msg

    def enqueue_at(
        self,
        tag: Hashable,
        due_time: int,
        target: MessageTarget | None = None,
        callback: Callable[[], Any] | None = None,
    ) -> ScheduledMessage:
        """Queue *tag* for delivery at absolute virtual time *due_time*."""
        target = self._resolve_target(target, callback)
        with self._cond:
            msg = self._queue.enqueue_at(tag, due_time, target=target, callback=callback)
            self._cond.notify_all()
        return msg

    def has_messages(self, tag: Hashable, target: MessageTarget | None = None) -> bool:
        with self._cond:
            return self._queue.has_tag(tag, target)

    def remove_messages(self, tag: Hashable, target: MessageTarget | None = None) -> int:
        with self._cond:
            return self._queue.remove_tag(tag, target)

    @property
    def pending_count(self) -> int:
        with self._cond:
            return len(self._queue)

    def next_due_time(self) -> int | None:
        with self._cond:
            return self._queue.next_due_time()

    def is_idle(self) -> bool:
        """True when no queued message is due at the current virtual time."""
        with self._cond:
            return not self._has_due()

    # -- synchronous dispatch ------------------------------------------------

    def dispatch_all(self) -> int:
        """Deliver every due message on this thread and return the count.

        Messages made due by handlers during the call are delivered too.
        """
        self._check_not_running("dispatch_all")
        count = self._drain()
        logger.debug("dispatch_all delivered %d message(s)", count)
        return count

    def dispatch_next(self) -> bool:
        """Deliver the earliest due message, if any.  Return whether one was."""
        self._check_not_running("dispatch_next")
        with self._dispatch_lock:
            msg = self._pop_due()
            if msg is None:
                return False
            self._deliver(msg)
        return True

    # -- auto-dispatch -------------------------------------------------------

    @property
    def state(self) -> AutoDispatchState:
        with self._cond:
            return self._state

    def start_auto_dispatch(self) -> None:
        """Start delivering due messages from a background thread."""
        with self._cond:
            if self._state is not AutoDispatchState.IDLE:
                raise IllegalStateError(
                    "start_auto_dispatch called while auto-dispatch is running"
                )
            self._worker = AutoDispatchWorker(
                self._cond, self._drain, self._has_due, self.config
            )
            self._state = AutoDispatchState.RUNNING
            self._worker.start()
        logger.debug("Auto-dispatch started")

    def stop_auto_dispatch(self) -> int:
        """Stop the background thread and return how many messages it delivered.

        Blocks until the thread has exited; nothing is dispatched by it
        afterwards.  The looper is idle again even when this raises.

        Raises:
            IllegalStateError: auto-dispatch was not running, or (when
                ``config.require_dispatch_on_stop`` is set) the session
                delivered no messages.
            BaseException: whatever a handler raised on the background thread.
        """
        with self._cond:
            if self._state is not AutoDispatchState.RUNNING or self._worker is None:
                raise IllegalStateError(
                    "stop_auto_dispatch called without start_auto_dispatch"
                )
            worker = self._worker

        worker.request_stop()
        try:
            worker.join()
        finally:
            with self._cond:
                self._worker = None
                self._state = AutoDispatchState.IDLE

        logger.debug("Auto-dispatch stopped after %d message(s)", worker.dispatched)
        if worker.error is not None:
            raise worker.error
        if worker.dispatched == 0 and self.config.require_dispatch_on_stop:
            raise IllegalStateError(
                "stop_auto_dispatch called before any messages were dispatched"
            )
        return worker.dispatched

    @contextmanager
    def auto_dispatch(self) -> Iterator[AutoDispatchWorker]:
        """Run the body with auto-dispatch on; stop it on the way out.

        The yielded worker's ``dispatched`` count is final after the block.
        If the body raises, the worker is still stopped but usage errors
        from the stop are suppressed so the body's exception propagates.
        """
        self.start_auto_dispatch()
        worker = self._worker
        try:
            yield worker
        except BaseException:
            try:
                self.stop_auto_dispatch()
            except UsageError as exc:
                logger.debug("Suppressed %s while unwinding auto-dispatch", exc)
            raise
        self.stop_auto_dispatch()

    # -- internals -----------------------------------------------------------

    def _resolve_target(
        self,
        target: MessageTarget | None,
        callback: Callable[[], Any] | None,
    ) -> MessageTarget | None:
        target = target if target is not None else self.target
        if target is None and callback is None:
            raise InvalidArgumentError("message has neither a target nor a callback")
        return target

    def _check_not_running(self, operation: str) -> None:
        with self._cond:
            if self._state is AutoDispatchState.RUNNING:
                raise IllegalStateError(
                    f"{operation} called while auto-dispatch is running"
                )

    def _has_due(self) -> bool:
        return self._queue.has_due(self._clock.now())

    def _pop_due(self) -> ScheduledMessage | None:
        with self._cond:
            return self._queue.pop_due(self._clock.now())

    def _drain(self, on_dispatch: Callable[[], None] | None = None) -> int:
        count = 0
        with self._dispatch_lock:
            while (msg := self._pop_due()) is not None:
                count += 1
                if on_dispatch is not None:
                    on_dispatch()
                self._deliver(msg)
        return count

    @staticmethod
    def _deliver(msg: ScheduledMessage) -> None:
        if msg.callback is not None:
            msg.callback()
        else:
            msg.target.handle_message(msg.tag)


# ---------------------------------------------------------------------------
# Handler
# ---------------------------------------------------------------------------

class Handler:
    """
    Sends messages to a :class:`MockLooper` and receives them back.

    Override :meth:`handle_message`, pass a *callback*, or wrap an instance
    with ``unittest.mock`` to observe deliveries.
    """

    def __init__(
        self,
        looper: MockLooper,
        callback: Callable[[Any], Any] | None = None,
    ) -> None:
        self.looper = looper
        self._callback = callback

    def handle_message(self, tag: Any) -> None:
        if self._callback is not None:
            self._callback(tag)

    # -- sending -------------------------------------------------------------

    def send_message(self, tag: Hashable) -> ScheduledMessage:
        return self.looper.enqueue(tag, 0, target=self)

    def send_message_delayed(self, tag: Hashable, delay: int) -> ScheduledMessage:
        return self.looper.enqueue(tag, delay, target=self)

    def send_message_at_time(self, tag: Hashable, when: int) -> ScheduledMessage:
        return self.looper.enqueue_at(tag, when, target=self)

    def post(self, fn: Callable[[], Any]) -> ScheduledMessage:
        return self.looper.enqueue(None, 0, target=self, callback=fn)

    def post_delayed(self, fn: Callable[[], Any], delay: int) -> ScheduledMessage:
        return self.looper.enqueue(None, delay, target=self, callback=fn)

    # -- queue inspection ----------------------------------------------------

    def has_messages(self, tag: Hashable) -> bool:
        return self.looper.has_messages(tag, target=self)

    def remove_messages(self, tag: Hashable) -> int:
        return self.looper.remove_messages(tag, target=self)
