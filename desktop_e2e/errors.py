"""Error taxonomy for the desktop e2e harness.

Every error here is scenario-local: the scenario base class catches it,
marks the scenario failed and moves on to teardown. The suite keeps going.
"""

from typing import Any, Iterable, Optional


class HarnessError(Exception):
    """Base class for harness errors."""
    pass


class SetupFailure(HarnessError):
    """Environment provisioning, launch or login failed."""

    def __init__(self, message: str, step: str = "setup"):
        super().__init__(message)
        self.step = step


class WaitTimeoutError(HarnessError):
    """A readiness condition never became true within its timeout."""

    def __init__(self, target: str, condition: str, timeout: Optional[float] = None):
        self.target = target
        self.condition = condition
        self.timeout = timeout

        message = f"Timed out waiting for '{target}' to be {condition}"
        if timeout is not None:
            message += f" after {timeout:.2f}s"
        super().__init__(message)


class AssertionFailure(AssertionError):
    """Observed state did not match the expectation."""

    def __init__(self, message: str, expected: Any = None, actual: Any = None):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class ServerMapKeyError(HarnessError, LookupError):
    """A view key was looked up that the server map never registered."""

    def __init__(self, key: str, available: Iterable[str] = ()):
        self.key = key
        self.available = sorted(available)
        super().__init__(
            f"No view registered for '{key}'. Available: {self.available}"
        )


class InputInjectionError(HarnessError):
    """Synthesizing OS-level input failed."""
    pass
