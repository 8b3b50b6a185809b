"""JSON and TAP reporters for scenario results.

Every non-passing scenario carries a failure record: the lifecycle phase it
failed in, the failure kind, and what was being waited for or compared.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..models import ResultStatus, TestResult, TestSuiteResult


logger = logging.getLogger(__name__)


def failure_record(result: TestResult) -> Optional[Dict[str, Any]]:
    """Phase, kind, message and details of a failed scenario, else None."""
    if result.failure_kind is None:
        return None
    phase = result.failed_phase
    return {
        "kind": result.failure_kind.value,
        "phase": phase.value if phase else None,
        "message": result.error_message,
        "details": result.failure_details,
    }


def describe_failure(result: TestResult) -> str:
    """One line naming what went wrong, for logs and CI output."""
    details = result.failure_details
    if "target" in details:
        return f"'{details['target']}' never became {details['condition']}"
    if "expected" in details:
        return f"expected {details['expected']!r}, got {details['actual']!r}"
    if "step" in details:
        return f"{details['step']} step: {result.error_message}"
    return result.error_message or ""


class JSONReporter:
    """Machine-readable reporter.

    Attributes:
        output_file: Optional output file path
        format_type: Output format (json or tap)
    """

    def __init__(self, output_file: Path | None = None, format_type: str = "json"):
        if format_type not in ("json", "tap"):
            raise ValueError(f"Unsupported format: {format_type}")
        self.output_file = output_file
        self.format_type = format_type

    def report_suite(self, suite_result: TestSuiteResult) -> str:
        """Render the suite, writing it to ``output_file`` when set."""
        if self.format_type == "tap":
            content = self._generate_tap(suite_result)
        else:
            content = self._generate_json(suite_result)

        if self.output_file:
            self._write_to_file(content)

        return content

    def _generate_json(self, suite_result: TestSuiteResult) -> str:
        report = {
            "summary": {
                "total": suite_result.total_tests,
                "passed": suite_result.passed_tests,
                "failed": suite_result.failed_tests,
                "errors": suite_result.error_tests,
                "duration_seconds": suite_result.total_duration_seconds,
            },
            "scenarios": [self._result_to_dict(r) for r in suite_result.test_results],
        }
        # expected/actual may be any observed value
        return json.dumps(report, indent=2, default=str)

    def _result_to_dict(self, result: TestResult) -> Dict[str, Any]:
        return {
            "scenario_id": result.scenario_id,
            "name": result.scenario_name,
            "status": result.status.value,
            "duration_seconds": result.duration_seconds,
            "states": [s.value for s in result.state_history],
            "failure": failure_record(result),
            "assertions": [
                {
                    "id": a.assertion_id,
                    "type": a.assertion_type.value,
                    "passed": a.status == ResultStatus.PASSED,
                    "expected": a.expected,
                    "actual": a.actual,
                }
                for a in result.assertion_results
            ],
            "artifacts": result.artifacts,
        }

    def _generate_tap(self, suite_result: TestSuiteResult) -> str:
        """TAP version 13, with a YAML block under each failure."""
        lines = [
            "TAP version 13",
            f"1..{suite_result.total_tests}",
        ]

        for i, result in enumerate(suite_result.test_results, start=1):
            label = f"{result.scenario_id} {result.scenario_name}"
            if result.status == ResultStatus.PASSED:
                lines.append(f"ok {i} - {label}")
            elif result.status == ResultStatus.SKIPPED:
                lines.append(f"ok {i} - {label} # SKIP")
            else:
                lines.append(f"not ok {i} - {label}")
                lines.extend(self._tap_diagnostics(result))

        lines.append(f"# pass {suite_result.passed_tests}")
        lines.append(f"# fail {suite_result.failed_tests + suite_result.error_tests}")

        return "\n".join(lines)

    def _tap_diagnostics(self, result: TestResult) -> List[str]:
        record = failure_record(result)
        if record is None:
            return []

        fields = {"kind": record["kind"], "phase": record["phase"], "message": record["message"]}
        fields.update(record["details"])

        # JSON scalars are valid YAML flow scalars
        return (
            ["  ---"]
            + [f"  {key}: {json.dumps(value, default=str)}" for key, value in fields.items()]
            + ["  ..."]
        )

    def _write_to_file(self, content: str) -> None:
        """Write report content to file.

        Raises:
            IOError: If unable to write file
        """
        try:
            self.output_file.parent.mkdir(parents=True, exist_ok=True)
            self.output_file.write_text(content)
            logger.info(f"Report written to {self.output_file}")
        except OSError as e:
            logger.error(f"Failed to write report to {self.output_file}: {e}")
            raise IOError(f"Failed to write report: {e}")

    def print_to_stdout(self, content: str) -> None:
        print(content)


class CIReporter:
    """Exit code plus one line per failed scenario."""

    def get_exit_code(self, suite_result: TestSuiteResult) -> int:
        """0 = success, 1 = assertion failures, 2 = errors."""
        if suite_result.error_tests > 0:
            return 2
        if suite_result.failed_tests > 0:
            return 1
        return 0

    def print_ci_summary(self, suite_result: TestSuiteResult) -> None:
        for result in suite_result.test_results:
            if result.status not in (ResultStatus.FAILED, ResultStatus.ERROR):
                continue
            phase = result.failed_phase.value if result.failed_phase else "?"
            kind = result.failure_kind.value if result.failure_kind else "?"
            print(f"{result.status.value.upper()} {result.scenario_id} [{kind} in {phase}]: {describe_failure(result)}")

        print(
            f"SCENARIOS: {suite_result.total_tests} total, "
            f"{suite_result.passed_tests} passed, "
            f"{suite_result.failed_tests} failed, "
            f"{suite_result.error_tests} errors "
            f"({suite_result.total_duration_seconds:.1f}s)"
        )
        print(f"STATUS: {('PASSED', 'FAILED', 'ERROR')[self.get_exit_code(suite_result)]}")
