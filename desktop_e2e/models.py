"""Data models for the desktop e2e harness.

This module defines the core data structures used for scenario execution,
results, and reporting.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class ResultStatus(str, Enum):
    """Test result status enumeration."""
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"
    ERROR = "error"


class ScenarioState(str, Enum):
    """Lifecycle state of a single scenario run.

    Idle -> Setup -> Exercising -> Asserting -> {Passed, Failed} -> TornDown
    """
    IDLE = "idle"
    SETUP = "setup"
    EXERCISING = "exercising"
    ASSERTING = "asserting"
    PASSED = "passed"
    FAILED = "failed"
    TORN_DOWN = "torn_down"


# Legal transitions; Failed is reachable from every active phase.
SCENARIO_TRANSITIONS: Dict[ScenarioState, frozenset] = {
    ScenarioState.IDLE: frozenset({ScenarioState.SETUP}),
    ScenarioState.SETUP: frozenset({ScenarioState.EXERCISING, ScenarioState.FAILED}),
    ScenarioState.EXERCISING: frozenset({ScenarioState.ASSERTING, ScenarioState.FAILED}),
    ScenarioState.ASSERTING: frozenset({ScenarioState.PASSED, ScenarioState.FAILED}),
    ScenarioState.PASSED: frozenset({ScenarioState.TORN_DOWN}),
    ScenarioState.FAILED: frozenset({ScenarioState.TORN_DOWN}),
    ScenarioState.TORN_DOWN: frozenset(),
}


class FailureKind(str, Enum):
    """Which branch of the error taxonomy ended a scenario."""
    SETUP = "setup"
    WAIT_TIMEOUT = "wait_timeout"
    ASSERTION = "assertion"
    TIMEOUT = "timeout"
    ERROR = "error"


class AssertionType(str, Enum):
    """Assertion type enumeration."""
    # Element assertions
    ELEMENT_FOCUSED = "element_focused"
    INPUT_CONTAINS = "input_contains"

    # Window assertions
    WINDOW_TITLE_EQUALS = "window_title_equals"
    WINDOW_OPENED = "window_opened"

    # Load signal assertions
    LOAD_SIGNAL_FIRED = "load_signal_fired"
    NO_DUPLICATE_LOAD = "no_duplicate_load"


@dataclass
class AssertionResult:
    """Result of a single assertion."""
    assertion_id: str
    assertion_type: AssertionType
    status: ResultStatus
    expected: Any
    actual: Any
    message: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        status_symbol = "✓" if self.status == ResultStatus.PASSED else "✗"
        msg = f"{status_symbol} {self.assertion_type.value}"
        if self.message:
            msg += f": {self.message}"
        return msg


@dataclass
class LogEntry:
    """Scenario execution log entry."""
    timestamp: datetime
    level: str
    message: str
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        time_str = self.timestamp.strftime("%H:%M:%S.%f")[:-3]
        return f"[{time_str}] {self.level}: {self.message}"


@dataclass
class TestResult:
    """Result of scenario execution."""
    __test__ = False

    scenario_id: str
    scenario_name: str
    status: ResultStatus
    start_time: datetime
    end_time: datetime
    duration_seconds: float
    assertion_results: List[AssertionResult] = field(default_factory=list)
    error_message: Optional[str] = None
    failure_kind: Optional[FailureKind] = None
    failure_details: Dict[str, Any] = field(default_factory=dict)
    state_history: List[ScenarioState] = field(default_factory=list)
    logs: List[LogEntry] = field(default_factory=list)
    artifacts: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if self.end_time < self.start_time:
            raise ValueError("end_time must be >= start_time")

        expected_duration = (self.end_time - self.start_time).total_seconds()
        if abs(self.duration_seconds - expected_duration) > 0.1:
            self.duration_seconds = expected_duration

    @property
    def passed_count(self) -> int:
        """Count of passed assertions."""
        return sum(1 for r in self.assertion_results if r.status == ResultStatus.PASSED)

    @property
    def failed_count(self) -> int:
        """Count of failed assertions."""
        return sum(1 for r in self.assertion_results if r.status == ResultStatus.FAILED)

    @property
    def total_count(self) -> int:
        return len(self.assertion_results)

    @property
    def failed_phase(self) -> Optional[ScenarioState]:
        """Lifecycle state the scenario was in when it failed."""
        if ScenarioState.FAILED not in self.state_history:
            return None
        index = self.state_history.index(ScenarioState.FAILED)
        return self.state_history[index - 1] if index else None

    @property
    def torn_down(self) -> bool:
        """Whether the run reached its terminal state."""
        return bool(self.state_history) and self.state_history[-1] == ScenarioState.TORN_DOWN

    def __str__(self) -> str:
        status_symbol = {
            ResultStatus.PASSED: "✓",
            ResultStatus.FAILED: "✗",
            ResultStatus.SKIPPED: "⊘",
            ResultStatus.ERROR: "⚠"
        }[self.status]

        return (
            f"{status_symbol} {self.scenario_name} "
            f"({self.duration_seconds:.1f}s) "
            f"[{self.passed_count}/{self.total_count}]"
        )


@dataclass
class TestSuiteResult:
    """Aggregated results for a suite run."""
    __test__ = False

    start_time: datetime
    end_time: datetime
    total_duration_seconds: float
    test_results: List[TestResult] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def total_tests(self) -> int:
        return len(self.test_results)

    @property
    def passed_tests(self) -> int:
        return sum(1 for r in self.test_results if r.status == ResultStatus.PASSED)

    @property
    def failed_tests(self) -> int:
        return sum(1 for r in self.test_results if r.status == ResultStatus.FAILED)

    @property
    def skipped_tests(self) -> int:
        return sum(1 for r in self.test_results if r.status == ResultStatus.SKIPPED)

    @property
    def error_tests(self) -> int:
        return sum(1 for r in self.test_results if r.status == ResultStatus.ERROR)

    @property
    def success_rate(self) -> float:
        """Percentage of scenarios that passed."""
        if self.total_tests == 0:
            return 0.0
        return (self.passed_tests / self.total_tests) * 100

    def __str__(self) -> str:
        return (
            f"Scenarios: {self.passed_tests} passed, {self.failed_tests} failed, "
            f"{self.skipped_tests} skipped, {self.error_tests} errors "
            f"({self.total_duration_seconds:.1f}s total)"
        )
