"""Base scenario abstract class.

This module provides the abstract base class for all scenarios, driving
the lifecycle state machine

    Idle -> Setup -> Exercising -> Asserting -> {Passed, Failed} -> TornDown

and guaranteeing that cleanup runs exactly once on every exit path.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..config import HarnessConfig
from ..errors import AssertionFailure, SetupFailure, WaitTimeoutError
from ..models import (
    SCENARIO_TRANSITIONS,
    AssertionResult,
    AssertionType,
    FailureKind,
    LogEntry,
    ResultStatus,
    ScenarioState,
    TestResult,
)


logger = logging.getLogger(__name__)


class BaseScenario(ABC):
    """Abstract base class for scenarios.

    Attributes:
        scenario_id: Unique identifier for this scenario
        name: Human-readable scenario name
        description: Purpose and expected outcome
        priority: Execution priority (1 = highest)
        timeout_seconds: Per-scenario timeout; None uses the config value
    """

    scenario_id: str = ""
    name: str = ""
    description: str = ""
    priority: int = 3
    timeout_seconds: Optional[float] = None

    def __init__(self, config: Optional[HarnessConfig] = None):
        self.config = config or HarnessConfig.default()
        self.state = ScenarioState.IDLE
        self._state_history: List[ScenarioState] = [ScenarioState.IDLE]
        self._start_time: Optional[datetime] = None
        self._end_time: Optional[datetime] = None
        self._logs: List[LogEntry] = []
        self._assertion_results: List[AssertionResult] = []
        self._artifacts: Dict[str, str] = {}
        self.cleanup_calls = 0

        if not self.scenario_id:
            raise ValueError(f"{self.__class__.__name__} must define scenario_id")
        if not self.name:
            raise ValueError(f"{self.__class__.__name__} must define name")

    @property
    def effective_timeout(self) -> float:
        if self.timeout_seconds is not None:
            return self.timeout_seconds
        return self.config.test_timeout_seconds

    @abstractmethod
    async def setup(self) -> None:
        """Setup phase: provision, launch and wait for baseline readiness.

        Raises:
            SetupFailure: If the environment cannot be prepared
        """
        pass

    @abstractmethod
    async def execute(self) -> None:
        """Exercise phase: arm signals and synthesize input."""
        pass

    @abstractmethod
    async def validate(self) -> None:
        """Assert phase: read back observable state.

        Raises:
            AssertionFailure: If observed state does not match
        """
        pass

    @abstractmethod
    async def cleanup(self) -> None:
        """Teardown: release the application handle.

        Called exactly once per run, whatever happened before.
        """
        pass

    def _transition(self, new_state: ScenarioState) -> None:
        if new_state not in SCENARIO_TRANSITIONS[self.state]:
            raise RuntimeError(f"Illegal transition {self.state.value} -> {new_state.value}")
        self.log_debug(f"State: {self.state.value} -> {new_state.value}")
        self.state = new_state
        self._state_history.append(new_state)

    async def run(self) -> TestResult:
        """Run the complete scenario lifecycle.

        Returns:
            TestResult with complete execution details

        Raises:
            RuntimeError: If this instance has already run
        """
        if self.state != ScenarioState.IDLE:
            raise RuntimeError(f"Scenario {self.scenario_id} has already run")

        self._start_time = datetime.now()
        status = ResultStatus.PASSED
        failure_kind: Optional[FailureKind] = None
        error_message = None
        failure_details: Dict[str, Any] = {}

        try:
            async with asyncio.timeout(self.effective_timeout):
                self.log_info(f"Starting scenario: {self.name}")

                self._transition(ScenarioState.SETUP)
                try:
                    await self.setup()
                except (SetupFailure, WaitTimeoutError):
                    raise
                except Exception as e:
                    raise SetupFailure(f"Setup failed: {e}") from e

                self._transition(ScenarioState.EXERCISING)
                await self.execute()

                self._transition(ScenarioState.ASSERTING)
                await self.validate()

                if any(r.status == ResultStatus.FAILED for r in self._assertion_results):
                    raise AssertionFailure("One or more assertions failed")

                self._transition(ScenarioState.PASSED)
                self.log_info("Scenario passed")

        except AssertionError as e:
            status = ResultStatus.FAILED
            failure_kind = FailureKind.ASSERTION
            error_message = str(e)
            failure_details = self._assertion_details(e)
            self.log_error(f"Assertion failed: {e}")

        except SetupFailure as e:
            status = ResultStatus.ERROR
            failure_kind = FailureKind.SETUP
            error_message = f"Setup failure ({e.step}): {e}"
            failure_details = {"step": e.step}
            self.log_error(error_message)

        except WaitTimeoutError as e:
            status = ResultStatus.ERROR
            failure_kind = FailureKind.WAIT_TIMEOUT
            error_message = str(e)
            failure_details = {"target": e.target, "condition": e.condition, "timeout": e.timeout}
            self.log_error(f"Wait timed out: {e}")

        except TimeoutError:
            status = ResultStatus.ERROR
            failure_kind = FailureKind.TIMEOUT
            error_message = f"Scenario exceeded timeout of {self.effective_timeout}s"
            failure_details = {"timeout": self.effective_timeout}
            self.log_error(error_message)

        except Exception as e:
            status = ResultStatus.ERROR
            failure_kind = FailureKind.ERROR
            error_message = f"Scenario execution error: {e}"
            failure_details = {"exception": type(e).__name__}
            self.log_error(error_message)

        finally:
            if self.state not in (ScenarioState.PASSED, ScenarioState.FAILED):
                self._transition(ScenarioState.FAILED)
            await self._teardown()

        self._end_time = datetime.now()
        duration = (self._end_time - self._start_time).total_seconds()

        return TestResult(
            scenario_id=self.scenario_id,
            scenario_name=self.name,
            status=status,
            start_time=self._start_time,
            end_time=self._end_time,
            duration_seconds=duration,
            assertion_results=self._assertion_results,
            error_message=error_message,
            failure_kind=failure_kind,
            failure_details=failure_details,
            state_history=list(self._state_history),
            logs=self._logs,
            artifacts=self._artifacts,
        )

    async def _teardown(self) -> None:
        """Run cleanup once; errors are logged, never raised."""
        self.cleanup_calls += 1
        try:
            self.log_info("Running cleanup phase")
            async with asyncio.timeout(self.config.cleanup_timeout_seconds):
                await self.cleanup()
        except TimeoutError:
            self.log_error(f"Cleanup exceeded {self.config.cleanup_timeout_seconds}s (suppressed)")
        except Exception as e:
            self.log_error(f"Cleanup error (suppressed): {e}")
        finally:
            self._transition(ScenarioState.TORN_DOWN)

    # Logging helpers

    def log_info(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._log("INFO", message, context)
        logger.info(message)

    def log_warning(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._log("WARNING", message, context)
        logger.warning(message)

    def log_error(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._log("ERROR", message, context)
        logger.error(message)

    def log_debug(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._log("DEBUG", message, context)
        logger.debug(message)

    def _log(self, level: str, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._logs.append(LogEntry(
            timestamp=datetime.now(),
            level=level,
            message=message,
            context=context or {},
        ))

    # Assertion helpers

    def record_assertion(
        self,
        assertion_id: str,
        assertion_type: AssertionType,
        expected: Any,
        actual: Any,
        message: Optional[str] = None,
        passed: Optional[bool] = None,
    ) -> AssertionResult:
        """Record assertion result.

        Args:
            assertion_id: Unique assertion identifier
            assertion_type: Type of assertion
            expected: Expected value
            actual: Actual value
            message: Optional custom message
            passed: Outcome; defaults to ``expected == actual``
        """
        if passed is None:
            passed = expected == actual

        result = AssertionResult(
            assertion_id=assertion_id,
            assertion_type=assertion_type,
            status=ResultStatus.PASSED if passed else ResultStatus.FAILED,
            expected=expected,
            actual=actual,
            message=message,
        )

        self._assertion_results.append(result)
        self.log_info(f"Assertion: {result}")
        return result

    def _assertion_details(self, error: AssertionError) -> Dict[str, Any]:
        """Expected/actual of the first failed check, else of ``error``."""
        for result in self._assertion_results:
            if result.status == ResultStatus.FAILED:
                return {
                    "assertion_id": result.assertion_id,
                    "expected": result.expected,
                    "actual": result.actual,
                }
        if isinstance(error, AssertionFailure):
            return {"expected": error.expected, "actual": error.actual}
        return {}

    def add_artifact(self, name: str, value: str) -> None:
        """Attach a file path or URL worth keeping to the result."""
        self._artifacts[name] = value
        self.log_debug(f"Added artifact: {name} -> {value}")

    async def wait(self, seconds: float) -> None:
        """Fixed-duration pause. Prefer a readiness wait where one exists."""
        self.log_debug(f"Waiting {seconds}s")
        await asyncio.sleep(seconds)

    def assert_equals(
        self,
        assertion_id: str,
        assertion_type: AssertionType,
        expected: Any,
        actual: Any,
        message: Optional[str] = None,
    ) -> None:
        """Assert that expected equals actual.

        Raises:
            AssertionFailure: If expected != actual
        """
        self.record_assertion(assertion_id, assertion_type, expected, actual, message)

        if expected != actual:
            raise AssertionFailure(message or f"Expected {expected!r}, got {actual!r}", expected, actual)

    def assert_contains(
        self,
        assertion_id: str,
        assertion_type: AssertionType,
        container: Any,
        item: Any,
        message: Optional[str] = None,
    ) -> None:
        """Assert that ``item`` is in ``container`` (substring or membership).

        Raises:
            AssertionFailure: If item not in container
        """
        found = container is not None and item in container
        self.record_assertion(assertion_id, assertion_type, item, container, message, passed=found)

        if not found:
            raise AssertionFailure(message or f"Expected {item!r} in {container!r}", item, container)

    def assert_true(
        self,
        assertion_id: str,
        assertion_type: AssertionType,
        actual: Any,
        message: Optional[str] = None,
    ) -> None:
        """Assert that ``actual`` is truthy."""
        self.assert_equals(assertion_id, assertion_type, True, bool(actual), message)
