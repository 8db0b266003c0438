"""
Mock Looper
===========

Deterministic, virtual-time message dispatch for unit tests.

Quick start::

    from mock_looper import MockLooper, RecordingHandler

    looper = MockLooper()
    handler = RecordingHandler(looper)
    handler.send_message(1)
    handler.send_message_delayed(2, 5000)
    looper.dispatch_all()          # delivers 1
    looper.move_time_forward(5000)
    looper.dispatch_all()          # delivers 2
"""

from .core.interfaces import (
    AutoDispatchState,
    MessageTarget,
    ScheduledMessage,
)
from .core.errors import IllegalStateError, InvalidArgumentError, UsageError
from .core.clock import VirtualClock
from .core.message_queue import MessageQueue
from .core.config import LooperConfig
from .core.results import AssertionResult, DispatchRecord, ScenarioResults
from .core.looper import Handler, MockLooper
from .core.orchestrator import ScenarioOrchestrator

from .tools.recorder import RecordingHandler
from .tools.asserter import DispatchAsserter, DispatchAssertionError

__version__ = "0.1.0"

__all__ = [
    # Core
    "AutoDispatchState",
    "MessageTarget",
    "ScheduledMessage",
    "IllegalStateError",
    "InvalidArgumentError",
    "UsageError",
    "VirtualClock",
    "MessageQueue",
    "LooperConfig",
    "AssertionResult",
    "DispatchRecord",
    "ScenarioResults",
    "Handler",
    "MockLooper",
    "ScenarioOrchestrator",
    # Tools
    "RecordingHandler",
    "DispatchAsserter",
    "DispatchAssertionError",
]
