"""Unit tests for result models, errors and logging setup."""

import logging
from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest

from desktop_e2e.errors import (
    AssertionFailure,
    HarnessError,
    ServerMapKeyError,
    SetupFailure,
    WaitTimeoutError,
)
from desktop_e2e.logging_config import ROOT_LOGGER, log_subprocess_call, setup_logging
from desktop_e2e.models import SCENARIO_TRANSITIONS, ResultStatus, ScenarioState, TestResult


class TestScenarioTransitions:
    """Lifecycle transition table."""

    def test_failed_reachable_from_active_phases(self):
        for state in (ScenarioState.SETUP, ScenarioState.EXERCISING, ScenarioState.ASSERTING):
            assert ScenarioState.FAILED in SCENARIO_TRANSITIONS[state]

    def test_torn_down_is_terminal(self):
        assert SCENARIO_TRANSITIONS[ScenarioState.TORN_DOWN] == frozenset()

    def test_idle_only_to_setup(self):
        assert SCENARIO_TRANSITIONS[ScenarioState.IDLE] == {ScenarioState.SETUP}


class TestTestResult:
    """Result dataclass validation."""

    def test_end_before_start_rejected(self):
        now = datetime.now()

        with pytest.raises(ValueError):
            TestResult("a", "A", ResultStatus.PASSED, now, now - timedelta(seconds=1), 0.0)

    def test_duration_corrected(self):
        now = datetime.now()

        result = TestResult("a", "A", ResultStatus.PASSED, now, now + timedelta(seconds=2), 99.0)

        assert result.duration_seconds == pytest.approx(2.0)
        assert not result.torn_down

    def test_failed_phase(self):
        now = datetime.now()
        S = ScenarioState

        result = TestResult(
            "a", "A", ResultStatus.ERROR, now, now, 0.0,
            state_history=[S.IDLE, S.SETUP, S.EXERCISING, S.FAILED, S.TORN_DOWN],
        )

        assert result.failed_phase == S.EXERCISING

    def test_failed_phase_none_when_passed(self):
        now = datetime.now()
        S = ScenarioState

        result = TestResult(
            "a", "A", ResultStatus.PASSED, now, now, 0.0,
            state_history=[S.IDLE, S.SETUP, S.EXERCISING, S.ASSERTING, S.PASSED, S.TORN_DOWN],
        )

        assert result.failed_phase is None
        assert result.failure_details == {}


class TestErrors:
    """Error taxonomy."""

    def test_wait_timeout_message(self):
        err = WaitTimeoutError("#searchBox", "focused", 0.5)

        assert str(err) == "Timed out waiting for '#searchBox' to be focused after 0.50s"
        assert isinstance(err, HarnessError)

    def test_assertion_failure_is_assertion_error(self):
        assert issubclass(AssertionFailure, AssertionError)
        assert not issubclass(AssertionFailure, HarnessError)

    def test_setup_failure_step(self):
        assert SetupFailure("x").step == "setup"

    def test_server_map_key_error(self):
        err = ServerMapKeyError("b___TAB", ["c___TAB", "a___TAB"])

        assert err.available == ["a___TAB", "c___TAB"]
        assert isinstance(err, LookupError)


class TestLogging:
    """Logger configuration."""

    def test_setup_logging_levels(self):
        assert setup_logging(debug=True).level == logging.DEBUG
        assert setup_logging(verbose=True).level == logging.INFO
        assert setup_logging(level="error").level == logging.ERROR
        assert setup_logging().level == logging.WARNING

    def test_setup_logging_replaces_handlers(self):
        setup_logging()
        logger = setup_logging()

        assert logger.name == ROOT_LOGGER
        assert len(logger.handlers) == 1
        assert logger.propagate is False

    def test_log_subprocess_call(self, caplog):
        logger = logging.getLogger("desktop_e2e_test_subprocess")
        result = SimpleNamespace(returncode=1, stderr="Can't open display")

        with caplog.at_level(logging.DEBUG, logger=logger.name):
            log_subprocess_call(["xdotool", "key", "ctrl+f"], result, logger)

        assert "xdotool key ctrl+f" in caplog.text
        assert "Can't open display" in caplog.text
