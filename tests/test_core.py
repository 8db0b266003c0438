"""Tests for the clock, queue, config and result containers."""

from __future__ import annotations

from unittest.mock import Mock

import pytest

from mock_looper.core.clock import VirtualClock
from mock_looper.core.config import LooperConfig
from mock_looper.core.errors import InvalidArgumentError, UsageError
from mock_looper.core.message_queue import MessageQueue
from mock_looper.core.results import AssertionResult, DispatchRecord, ScenarioResults


class TestVirtualClock:

    def test_starts_at_zero(self):
        assert VirtualClock().now() == 0

    def test_advance(self):
        clock = VirtualClock()
        assert clock.advance(3000) == 3000
        clock.advance(2000)
        assert clock.now() == 5000

    def test_advance_zero_is_noop(self):
        clock = VirtualClock(100)
        clock.advance(0)
        assert clock.now() == 100

    def test_negative_advance_rejected(self):
        clock = VirtualClock()
        clock.advance(10)
        with pytest.raises(InvalidArgumentError):
            clock.advance(-1)
        assert clock.now() == 10

    def test_non_int_advance_rejected(self):
        with pytest.raises(InvalidArgumentError):
            VirtualClock().advance(1.5)

    def test_negative_start_rejected(self):
        with pytest.raises(InvalidArgumentError):
            VirtualClock(-5)

    def test_invalid_argument_is_value_error(self):
        with pytest.raises(ValueError):
            VirtualClock().advance(-1)


class TestMessageQueue:

    def test_fifo_for_equal_due_time(self):
        q = MessageQueue()
        for tag in (1, 1, 2, 3):
            q.enqueue(tag, 0, now=0)
        assert [m.tag for m in q.drain_due(0)] == [1, 1, 2, 3]
        assert len(q) == 0

    def test_due_time_gating(self):
        q = MessageQueue()
        q.enqueue("a", 0, now=0)
        q.enqueue("late", 5000, now=0)
        assert [m.tag for m in q.drain_due(4999)] == ["a"]
        assert len(q) == 1
        assert [m.tag for m in q.drain_due(5000)] == ["late"]

    def test_orders_by_due_time_then_sequence(self):
        q = MessageQueue()
        q.enqueue("c", 5000, now=0)
        q.enqueue("a", 1000, now=4000)
        q.enqueue("b", 2000, now=4000)
        msgs = list(q.drain_due(7000))
        assert [m.tag for m in msgs] == ["c", "a", "b"]
        assert [m.due_time for m in msgs] == [5000, 5000, 6000]

    def test_sequence_strictly_increasing(self):
        q = MessageQueue()
        seqs = [q.enqueue(i, 0, now=0).sequence for i in range(5)]
        q.clear()
        seqs.append(q.enqueue("x", 0, now=0).sequence)
        assert seqs == sorted(set(seqs))

    def test_drain_is_lazy(self):
        q = MessageQueue()
        q.enqueue(1, 0, now=0)
        q.enqueue(2, 0, now=0)
        drain = q.drain_due(0)
        assert next(drain).tag == 1
        assert len(q) == 1
        q.enqueue(3, 0, now=0)
        assert [m.tag for m in drain] == [2, 3]

    def test_pop_due_returns_none_when_nothing_due(self):
        q = MessageQueue()
        q.enqueue(1, 10, now=0)
        assert q.pop_due(9) is None
        assert q.has_due(10)

    def test_enqueue_at_past_time_is_due(self):
        q = MessageQueue()
        q.enqueue("now", 0, now=100)
        q.enqueue_at("past", 50)
        assert [m.tag for m in q.drain_due(100)] == ["past", "now"]

    def test_negative_delay_rejected(self):
        q = MessageQueue()
        with pytest.raises(InvalidArgumentError):
            q.enqueue(1, -1, now=0)
        assert len(q) == 0

    def test_next_due_time(self):
        q = MessageQueue()
        assert q.next_due_time() is None
        q.enqueue(1, 700, now=0)
        q.enqueue(2, 300, now=0)
        assert q.next_due_time() == 300

    def test_remove_tag(self):
        q = MessageQueue()
        for tag in (1, 2, 1, 3):
            q.enqueue(tag, 0, now=0)
        assert q.has_tag(1)
        assert q.remove_tag(1) == 2
        assert not q.has_tag(1)
        assert [m.tag for m in q.drain_due(0)] == [2, 3]

    def test_remove_tag_scoped_to_target(self):
        q = MessageQueue()
        first, second = Mock(), Mock()
        q.enqueue(1, 0, now=0, target=first)
        q.enqueue(1, 0, now=0, target=second)
        assert q.remove_tag(1, target=first) == 1
        [remaining] = list(q.drain_due(0))
        assert remaining.target is second


class TestLooperConfig:

    def test_defaults(self):
        cfg = LooperConfig()
        assert cfg.start_time == 0
        assert cfg.require_dispatch_on_stop

    def test_from_dict(self):
        cfg = LooperConfig.from_dict({"start_time": 10, "idle_wait_s": 0.001})
        assert cfg.start_time == 10
        assert cfg.idle_wait_s == 0.001

    def test_from_empty(self):
        assert LooperConfig.from_dict(None) == LooperConfig()

    def test_unknown_key(self):
        with pytest.raises(ValueError, match="bogus"):
            LooperConfig.from_dict({"bogus": 1})


class TestScenarioResults:

    def test_all_passed(self):
        r = ScenarioResults()
        r.add(0, AssertionResult(timestamp=0, passed=True, description="a"))
        r.add(1, AssertionResult(timestamp=1, passed=True, description="b"))
        assert r.passed

    def test_failures(self):
        r = ScenarioResults()
        r.add(0, AssertionResult(timestamp=0, passed=True))
        r.add(1, AssertionResult(timestamp=1, passed=False, description="bad"))
        assert not r.all_passed()
        assert [f.description for f in r.failures] == ["bad"]

    def test_add_dict(self):
        r = ScenarioResults()
        r.add(0, {"passed": True, "description": "from dict"})
        assert r.assertions[0].passed

    def test_dispatched_tags(self):
        r = ScenarioResults(dispatched=[DispatchRecord(1, 0), DispatchRecord(2, 5)])
        assert r.dispatched_tags == [1, 2]


class TestErrors:

    def test_hierarchy(self):
        assert issubclass(InvalidArgumentError, UsageError)
