"""Window and element assertions for scenarios.

Each assertion reads observable state from a window, records the outcome
on the scenario and raises ``AssertionFailure`` on mismatch.
"""

import logging
from typing import Any

from ..models import AssertionType
from ..readiness import IS_FOCUSED_SCRIPT


logger = logging.getLogger(__name__)


class WindowAssertions:
    """Assertions against a Playwright page.

    Args:
        recorder: Scenario that records assertion results
    """

    def __init__(self, recorder: Any):
        self.recorder = recorder
        self._counter = 0

    def _next_id(self) -> str:
        self._counter += 1
        return f"assert_{self._counter:03d}"

    async def is_focused(self, window: Any, selector: str) -> bool:
        return bool(await window.evaluate(IS_FOCUSED_SCRIPT, selector))

    async def assert_focused(self, window: Any, selector: str) -> None:
        """Assert ``selector`` is the active element of ``window``."""
        actual = await self.is_focused(window, selector)
        self.recorder.assert_equals(
            self._next_id(),
            AssertionType.ELEMENT_FOCUSED,
            True,
            actual,
            f"'{selector}' should hold focus",
        )
        logger.info(f"✓ '{selector}' is focused")

    async def assert_input_contains(self, window: Any, selector: str, substring: str) -> None:
        """Assert the value of input ``selector`` contains ``substring``."""
        value = await window.input_value(selector)
        self.recorder.assert_contains(
            self._next_id(),
            AssertionType.INPUT_CONTAINS,
            value,
            substring,
            f"'{selector}' value {value!r} should contain {substring!r}",
        )
        logger.info(f"✓ '{selector}' contains {substring!r}")

    async def assert_title_equals(self, window: Any, expected: str) -> None:
        """Assert the window title is exactly ``expected``."""
        title = await window.title()
        self.recorder.assert_equals(
            self._next_id(),
            AssertionType.WINDOW_TITLE_EQUALS,
            expected,
            title,
            f"Window title should be {expected!r}, got {title!r}",
        )
        logger.info(f"✓ Window title is {expected!r}")
