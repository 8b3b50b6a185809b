"""Unit tests for the scenario lifecycle.

These tests validate:
- State history for passing and failing runs
- Cleanup runs exactly once on every exit path
- Each error class maps to its own failure kind
- A scenario instance runs at most once
"""

import asyncio

import pytest

from desktop_e2e.config import HarnessConfig
from desktop_e2e.errors import AssertionFailure, SetupFailure, WaitTimeoutError
from desktop_e2e.models import AssertionType, FailureKind, ResultStatus, ScenarioState
from desktop_e2e.scenarios.base_scenario import BaseScenario


S = ScenarioState


class RecordingScenario(BaseScenario):
    """Scenario whose phases run injected callables."""

    scenario_id = "lifecycle_001"
    name = "Lifecycle"

    def __init__(self, config=None, setup=None, execute=None, validate=None, cleanup=None):
        super().__init__(config or HarnessConfig(test_timeout_seconds=2.0, cleanup_timeout_seconds=0.5))
        self._phases = {"setup": setup, "execute": execute, "validate": validate, "cleanup": cleanup}
        self.phases_run = []

    async def _phase(self, name):
        self.phases_run.append(name)
        fn = self._phases[name]
        if fn is not None:
            await fn(self)

    async def setup(self):
        await self._phase("setup")

    async def execute(self):
        await self._phase("execute")

    async def validate(self):
        await self._phase("validate")

    async def cleanup(self):
        await self._phase("cleanup")


def _raise(exc):
    async def fn(scenario):
        raise exc
    return fn


class TestScenarioLifecycle:
    """State machine and teardown guarantees."""

    @pytest.mark.asyncio
    async def test_pass_history(self):
        scenario = RecordingScenario()

        result = await scenario.run()

        assert result.status == ResultStatus.PASSED
        assert result.failure_kind is None
        assert result.state_history == [S.IDLE, S.SETUP, S.EXERCISING, S.ASSERTING, S.PASSED, S.TORN_DOWN]
        assert result.torn_down
        assert scenario.cleanup_calls == 1

    @pytest.mark.asyncio
    async def test_setup_failure(self):
        scenario = RecordingScenario(setup=_raise(SetupFailure("no binary", step="launch")))

        result = await scenario.run()

        assert result.status == ResultStatus.ERROR
        assert result.failure_kind == FailureKind.SETUP
        assert "launch" in result.error_message
        assert result.failure_details == {"step": "launch"}
        assert result.failed_phase == S.SETUP
        assert result.state_history == [S.IDLE, S.SETUP, S.FAILED, S.TORN_DOWN]
        assert scenario.phases_run == ["setup", "cleanup"]

    @pytest.mark.asyncio
    async def test_unexpected_setup_error_is_setup_failure(self):
        scenario = RecordingScenario(setup=_raise(KeyError("example___TAB_MESSAGING")))

        result = await scenario.run()

        assert result.failure_kind == FailureKind.SETUP

    @pytest.mark.asyncio
    async def test_wait_timeout_in_setup(self):
        scenario = RecordingScenario(setup=_raise(WaitTimeoutError(".LoadingScreen", "hidden", 10)))

        result = await scenario.run()

        assert result.status == ResultStatus.ERROR
        assert result.failure_kind == FailureKind.WAIT_TIMEOUT
        assert ".LoadingScreen" in result.error_message
        assert result.failure_details == {"target": ".LoadingScreen", "condition": "hidden", "timeout": 10}

    @pytest.mark.asyncio
    async def test_assertion_failure(self):
        scenario = RecordingScenario(validate=_raise(AssertionFailure("title mismatch", "DevTools", "Mattermost")))

        result = await scenario.run()

        assert result.status == ResultStatus.FAILED
        assert result.failure_kind == FailureKind.ASSERTION
        assert result.failure_details == {"expected": "DevTools", "actual": "Mattermost"}
        assert result.failed_phase == S.ASSERTING
        assert result.state_history == [S.IDLE, S.SETUP, S.EXERCISING, S.ASSERTING, S.FAILED, S.TORN_DOWN]

    @pytest.mark.asyncio
    async def test_error_during_exercise(self):
        scenario = RecordingScenario(execute=_raise(RuntimeError("boom")))

        result = await scenario.run()

        assert result.failure_kind == FailureKind.ERROR
        assert result.state_history[-3:] == [S.EXERCISING, S.FAILED, S.TORN_DOWN]
        assert result.failed_phase == S.EXERCISING
        assert result.failure_details == {"exception": "RuntimeError"}
        assert scenario.phases_run == ["setup", "execute", "cleanup"]

    @pytest.mark.asyncio
    async def test_scenario_timeout(self):
        async def hang(scenario):
            await asyncio.sleep(10)

        scenario = RecordingScenario(
            config=HarnessConfig(test_timeout_seconds=0.05, cleanup_timeout_seconds=0.5),
            execute=hang,
        )

        result = await scenario.run()

        assert result.failure_kind == FailureKind.TIMEOUT
        assert scenario.cleanup_calls == 1
        assert result.torn_down

    @pytest.mark.asyncio
    async def test_cleanup_error_is_suppressed(self):
        scenario = RecordingScenario(cleanup=_raise(RuntimeError("close failed")))

        result = await scenario.run()

        assert result.status == ResultStatus.PASSED
        assert result.torn_down
        assert any("close failed" in log.message for log in result.logs)

    @pytest.mark.asyncio
    async def test_cleanup_timeout_is_bounded(self):
        async def hang(scenario):
            await asyncio.sleep(10)

        scenario = RecordingScenario(
            config=HarnessConfig(test_timeout_seconds=2.0, cleanup_timeout_seconds=0.05),
            cleanup=hang,
        )

        result = await scenario.run()

        assert result.torn_down
        assert scenario.cleanup_calls == 1

    @pytest.mark.asyncio
    async def test_run_twice_raises(self):
        scenario = RecordingScenario()
        await scenario.run()

        with pytest.raises(RuntimeError, match="already run"):
            await scenario.run()

        assert scenario.cleanup_calls == 1

    @pytest.mark.asyncio
    async def test_recorded_failure_fails_scenario(self):
        async def soft_fail(scenario):
            scenario.record_assertion("a1", AssertionType.WINDOW_OPENED, True, False)

        scenario = RecordingScenario(validate=soft_fail)

        result = await scenario.run()

        assert result.status == ResultStatus.FAILED
        assert result.failed_count == 1
        assert result.failure_details == {"assertion_id": "a1", "expected": True, "actual": False}

    def test_missing_scenario_id(self):
        class Nameless(RecordingScenario):
            scenario_id = ""

        with pytest.raises(ValueError):
            Nameless()

    def test_timeout_falls_back_to_config(self):
        scenario = RecordingScenario(config=HarnessConfig(test_timeout_seconds=12.0))

        assert scenario.effective_timeout == 12.0


class TestScenarioAssertions:
    """Assertion helpers."""

    def test_assert_equals_records_and_raises(self):
        scenario = RecordingScenario()

        with pytest.raises(AssertionFailure) as exc_info:
            scenario.assert_equals("t", AssertionType.WINDOW_TITLE_EQUALS, "DevTools", "Other")

        assert exc_info.value.expected == "DevTools"
        assert exc_info.value.actual == "Other"
        assert scenario._assertion_results[0].status == ResultStatus.FAILED

    def test_assert_contains(self):
        scenario = RecordingScenario()

        scenario.assert_contains("c", AssertionType.INPUT_CONTAINS, "in: town-square ", "in:")

        with pytest.raises(AssertionFailure):
            scenario.assert_contains("c2", AssertionType.INPUT_CONTAINS, "", "in:")

        with pytest.raises(AssertionFailure):
            scenario.assert_contains("c3", AssertionType.INPUT_CONTAINS, None, "in:")

    def test_assert_true(self):
        scenario = RecordingScenario()

        scenario.assert_true("t", AssertionType.LOAD_SIGNAL_FIRED, 1)

        with pytest.raises(AssertionFailure):
            scenario.assert_true("f", AssertionType.LOAD_SIGNAL_FIRED, None)

    @pytest.mark.asyncio
    async def test_artifacts_reach_result(self):
        async def record_url(scenario):
            scenario.add_artifact("devtools_url", "devtools://devtools/bundled/devtools_app.html")

        result = await RecordingScenario(validate=record_url).run()

        assert result.artifacts == {"devtools_url": "devtools://devtools/bundled/devtools_app.html"}
