from .recorder import RecordingHandler
from .asserter import DispatchAsserter, DispatchAssertionError

__all__ = [
    "RecordingHandler",
    "DispatchAsserter",
    "DispatchAssertionError",
]
