"""Looper configuration."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any


@dataclass
class LooperConfig:
    """Settings for a :class:`MockLooper`.

    ``idle_wait_s`` bounds how long the auto-dispatch thread sleeps between
    checks when nothing is due; it is woken early by enqueue, time moves and
    stop requests.  It never influences which messages are due.
    """

    start_time: int = 0
    idle_wait_s: float = 0.01
    require_dispatch_on_stop: bool = True
    thread_name: str = "mock-looper-auto-dispatch"

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> LooperConfig:
        """Build a config from a mapping, e.g. the ``looper:`` block of a scenario."""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown looper settings: {sorted(unknown)}")
        return cls(**data)
