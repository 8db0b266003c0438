"""Scenario orchestrator: drives a mock looper through a YAML script of steps."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from ..tools.recorder import RecordingHandler
from .config import LooperConfig
from .errors import UsageError
from .interfaces import AutoDispatchState
from .looper import MockLooper
from .results import AssertionResult, ScenarioResults

logger = logging.getLogger(__name__)

_STEP_KEYS = ("action", "expect_error")


class ScenarioOrchestrator:
    """
    Replays a scripted test-driver session against a fresh :class:`MockLooper`.

    A scenario looks like::

        scenario:
          name: delayed_dispatch
          looper:
            require_dispatch_on_stop: true
          steps:
            - action: send
              tag: 1
            - action: send
              tag: 3
              delay: 5s
            - action: move_time
              by: 5000
            - action: dispatch_all
              expect: 2
            - action: expect_dispatched
              tags: [1, 3]

    Every message is sent through one :class:`RecordingHandler`; its log
    ends up in :attr:`ScenarioResults.dispatched`.
    """

    def __init__(self, scenario_path: str | Path | None = None):
        self.scenario: dict[str, Any] = {}
        if scenario_path is not None:
            self.scenario = self._load_scenario(scenario_path)

        self.looper: MockLooper | None = None
        self.recorder: RecordingHandler | None = None

    # -- running a scenario --------------------------------------------------

    def run(self, scenario: str | Path | dict | None = None) -> ScenarioResults:
        """Execute every step of *scenario* in order and collect the outcome."""
        if scenario is not None:
            if isinstance(scenario, dict):
                self.scenario = scenario.get("scenario", scenario)
            else:
                self.scenario = self._load_scenario(scenario)

        config = LooperConfig.from_dict(self.scenario.get("looper"))
        self.looper = MockLooper(config)
        self.recorder = RecordingHandler(self.looper)
        results = ScenarioResults(name=self.scenario.get("name", ""))

        for index, step in enumerate(self.scenario.get("steps", [])):
            self._run_step(index, step, results)

        if self.looper.state is AutoDispatchState.RUNNING:
            try:
                self.looper.stop_auto_dispatch()
            except UsageError as exc:
                logger.warning("Auto-dispatch left running at end of scenario: %s", exc)

        results.dispatched = self.recorder.records
        results.final_time = self.looper.now()
        return results

    # -- step dispatch -------------------------------------------------------

    def _run_step(self, index: int, step: dict[str, Any], results: ScenarioResults) -> None:
        action = step.get("action", "")
        expect_error = bool(step.get("expect_error", False))
        params = {k: v for k, v in step.items() if k not in _STEP_KEYS}

        try:
            self._dispatch(action, params, results)
        except UsageError as exc:
            if not expect_error:
                logger.exception("Usage error in step %d (%s)", index, action)
            results.add(
                self.looper.now(),
                AssertionResult(
                    timestamp=self.looper.now(),
                    passed=expect_error,
                    description=f"step {index}: {action} raised {type(exc).__name__}",
                    actual=str(exc),
                ),
            )
            return
        except Exception as exc:
            logger.exception("Error in step %d (%s)", index, action)
            results.add(
                self.looper.now(),
                AssertionResult(
                    timestamp=self.looper.now(),
                    passed=False,
                    description=f"Exception in {action}",
                    actual=repr(exc),
                ),
            )
            return

        if expect_error:
            results.add(
                self.looper.now(),
                AssertionResult(
                    timestamp=self.looper.now(),
                    passed=False,
                    description=f"step {index}: {action} did not raise",
                    expected="UsageError",
                ),
            )

    def _dispatch(self, action: str, params: dict[str, Any], results: ScenarioResults) -> None:
        looper = self.looper
        recorder = self.recorder

        match action:
            case "send":
                tag = params.get("tag")
                if "at" in params:
                    recorder.send_message_at_time(tag, self._parse_time(params["at"]))
                else:
                    recorder.send_message_delayed(tag, self._parse_time(params.get("delay", 0)))

            case "remove":
                recorder.remove_messages(params.get("tag"))

            case "move_time":
                looper.move_time_forward(self._parse_time(params.get("by", 0)))

            case "dispatch_all":
                count = looper.dispatch_all()
                self._check_count(action, params, count, results)

            case "dispatch_next":
                count = int(looper.dispatch_next())
                self._check_count(action, params, count, results)

            case "start_auto_dispatch":
                looper.start_auto_dispatch()

            case "stop_auto_dispatch":
                count = looper.stop_auto_dispatch()
                self._check_count(action, params, count, results)

            case "expect_dispatched":
                expected = list(params.get("tags", []))
                actual = recorder.tags
                results.add(
                    looper.now(),
                    AssertionResult(
                        timestamp=looper.now(),
                        passed=actual == expected,
                        description="expect_dispatched",
                        expected=expected,
                        actual=actual,
                    ),
                )

            case "expect_pending":
                expected = params.get("count", 0)
                actual = looper.pending_count
                results.add(
                    looper.now(),
                    AssertionResult(
                        timestamp=looper.now(),
                        passed=actual == expected,
                        description="expect_pending",
                        expected=expected,
                        actual=actual,
                    ),
                )

            case _:
                logger.warning("Unknown action: %s", action)

    # -- helpers -------------------------------------------------------------

    def _check_count(
        self,
        action: str,
        params: dict[str, Any],
        count: int,
        results: ScenarioResults,
    ) -> None:
        if "expect" not in params:
            return
        expected = params["expect"]
        results.add(
            self.looper.now(),
            AssertionResult(
                timestamp=self.looper.now(),
                passed=count == expected,
                description=f"{action} count",
                expected=expected,
                actual=count,
            ),
        )

    # -- YAML loading --------------------------------------------------------

    @staticmethod
    def _load_scenario(path: str | Path) -> dict[str, Any]:
        path = Path(path)
        with open(path) as fh:
            data = yaml.safe_load(fh) or {}
        return data.get("scenario", data)

    @staticmethod
    def _parse_time(value: str | int | float) -> int:
        """Convert ``5000``, ``'250ms'`` or ``'2.5s'`` to virtual milliseconds."""
        if isinstance(value, bool):
            raise ValueError(f"Invalid duration: {value!r}")
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            return ScenarioOrchestrator._whole_ms(value, value)
        text = str(value).strip()
        if text.endswith("ms"):
            return ScenarioOrchestrator._whole_ms(float(text[:-2]), value)
        if text.endswith("s"):
            return ScenarioOrchestrator._whole_ms(float(text[:-1]) * 1000, value)
        return ScenarioOrchestrator._whole_ms(float(text), value)

    @staticmethod
    def _whole_ms(ms: float, original: Any) -> int:
        """Reject durations that are not a whole number of milliseconds."""
        rounded = round(ms)
        if abs(ms - rounded) > 1e-9:
            raise ValueError(f"Duration is not a whole number of milliseconds: {original!r}")
        return int(rounded)
