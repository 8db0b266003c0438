"""Shared pytest fixtures for the mock looper."""

from __future__ import annotations

from unittest.mock import Mock

import pytest

from mock_looper.core.config import LooperConfig
from mock_looper.core.looper import Handler, MockLooper
from mock_looper.tools.asserter import DispatchAsserter
from mock_looper.tools.recorder import RecordingHandler


@pytest.fixture
def looper() -> MockLooper:
    """Return a looper with a short idle wait so auto-dispatch tests stay fast."""
    return MockLooper(LooperConfig(idle_wait_s=0.005))


@pytest.fixture
def handle() -> Mock:
    """Callback spy that receives every tag delivered to ``handler``."""
    return Mock()


@pytest.fixture
def handler(looper: MockLooper, handle: Mock) -> Handler:
    return Handler(looper, callback=handle)


@pytest.fixture
def recorder(looper: MockLooper) -> RecordingHandler:
    return RecordingHandler(looper)


@pytest.fixture
def asserter(recorder: RecordingHandler) -> DispatchAsserter:
    return DispatchAsserter(recorder)
