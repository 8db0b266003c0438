from .interfaces import AutoDispatchState, MessageTarget, ScheduledMessage
from .errors import IllegalStateError, InvalidArgumentError, UsageError
from .clock import VirtualClock
from .message_queue import MessageQueue
from .config import LooperConfig
from .results import AssertionResult, DispatchRecord, ScenarioResults
from .looper import Handler, MockLooper
from .orchestrator import ScenarioOrchestrator

__all__ = [
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
]
