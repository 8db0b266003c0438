"""Usage errors raised by the mock looper."""

from __future__ import annotations


class UsageError(Exception):
    """A test-authoring mistake: the looper was driven incorrectly."""


class IllegalStateError(UsageError, RuntimeError):
    """An auto-dispatch state transition was not allowed."""


class InvalidArgumentError(UsageError, ValueError):
    """A delay, time advance or due time was out of range."""
