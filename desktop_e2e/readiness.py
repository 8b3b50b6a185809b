"""Readiness waiting for UI elements, views and windows.

Two kinds of waits live here and must not be confused:

- Level-triggered: ``wait_for_element`` and ``poll_until`` sample current
  state and may be called at any time, including after the state already
  holds (they return immediately then).
- Edge-triggered: ``LoadSignal`` and ``WindowSignal`` are one-shot
  notifications. They must be armed before the action that triggers them,
  fire at most once, and never replay an event that happened before arming.
"""

import asyncio
import logging
import time
from enum import Enum
from typing import Any, Awaitable, Callable

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from .errors import WaitTimeoutError


logger = logging.getLogger(__name__)


IS_FOCUSED_SCRIPT = (
    "(selector) => { const el = document.querySelector(selector);"
    " return el !== null && el === document.activeElement; }"
)


class ElementCondition(str, Enum):
    """Target state for an element wait."""
    ATTACHED = "attached"
    DETACHED = "detached"
    VISIBLE = "visible"
    HIDDEN = "hidden"
    FOCUSED = "focused"


async def poll_until(
    predicate: Callable[[], Awaitable[Any]],
    timeout: float,
    description: str = "condition",
    condition: str = "true",
    initial_interval: float = 0.05,
    max_interval: float = 1.0,
    factor: float = 2.0,
) -> Any:
    """Poll an async predicate with exponential backoff.

    The predicate is checked once before any sleep, so a condition that
    already holds returns without blocking. Sleeps never overshoot the
    deadline.

    Args:
        predicate: Async callable; the first truthy result is returned
        timeout: Upper bound in seconds
        description: What is being waited on (for the error message)
        condition: Expected condition (for the error message)
        initial_interval: First sleep between checks
        max_interval: Cap on the sleep between checks
        factor: Backoff multiplier

    Returns:
        The first truthy predicate result

    Raises:
        WaitTimeoutError: If the predicate stays falsy until the deadline
    """
    deadline = time.monotonic() + timeout
    interval = initial_interval
    attempts = 0

    while True:
        attempts += 1
        result = await predicate()
        if result:
            logger.debug(f"'{description}' became {condition} after {attempts} check(s)")
            return result

        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise WaitTimeoutError(description, condition, timeout)

        await asyncio.sleep(min(interval, remaining))
        interval = min(interval * factor, max_interval)


async def wait_for_element(
    window: Any,
    selector: str,
    condition: ElementCondition = ElementCondition.ATTACHED,
    timeout: float = 10.0,
) -> None:
    """Block until an element reaches the requested state.

    Args:
        window: Playwright page (or anything with the same API)
        selector: CSS selector
        condition: Target state
        timeout: Timeout in seconds

    Raises:
        WaitTimeoutError: Identifying the selector and the condition
    """
    condition = ElementCondition(condition)

    if condition == ElementCondition.FOCUSED:
        async def is_focused() -> bool:
            return bool(await window.evaluate(IS_FOCUSED_SCRIPT, selector))

        await poll_until(is_focused, timeout, description=selector, condition=condition.value)
        return

    try:
        await window.wait_for_selector(selector, state=condition.value, timeout=timeout * 1000)
    except PlaywrightTimeoutError:
        raise WaitTimeoutError(selector, condition.value, timeout) from None

    logger.debug(f"'{selector}' is {condition.value}")


class _OneShotSignal:
    """Single-use notification bound to one emitter event."""

    event_name = ""
    description = "signal"

    def __init__(self, emitter: Any):
        self._emitter = emitter
        self._future: asyncio.Future = asyncio.get_running_loop().create_future()
        self._armed = False
        self.fire_count = 0

    def _arm(self) -> None:
        self._subscribe(self._on_event)
        self._armed = True

    def _subscribe(self, handler: Callable) -> None:
        self._emitter.once(self.event_name, handler)

    def _unsubscribe(self, handler: Callable) -> None:
        self._emitter.remove_listener(self.event_name, handler)

    def _on_event(self, payload: Any = None) -> None:
        if self._future.done():
            return
        self.fire_count += 1
        self._armed = False
        self._future.set_result(payload)

    @property
    def fired(self) -> bool:
        return self._future.done() and not self._future.cancelled()

    async def wait(self, timeout: float) -> Any:
        """Wait for the event.

        Raises:
            WaitTimeoutError: If the event has not fired within timeout
        """
        try:
            return await asyncio.wait_for(asyncio.shield(self._future), timeout)
        except asyncio.TimeoutError:
            raise WaitTimeoutError(self.description, "fired", timeout) from None

    def cancel(self) -> None:
        """Unregister without firing. No-op after the signal fired."""
        if self._armed:
            try:
                self._unsubscribe(self._on_event)
            except KeyError:
                pass
            self._armed = False
        if not self._future.done():
            self._future.cancel()


class LoadSignal(_OneShotSignal):
    """Fires once when a view finishes loading its content."""

    event_name = "load"

    def __init__(self, window: Any):
        super().__init__(window)
        self.description = f"load of {getattr(window, 'url', window)}"


class WindowSignal(_OneShotSignal):
    """Fires once with the next window the application opens."""

    event_name = "window"
    description = "new window"

    def _subscribe(self, handler: Callable) -> None:
        self._emitter.add_window_listener(handler)

    def _unsubscribe(self, handler: Callable) -> None:
        self._emitter.remove_window_listener(handler)

    def _on_event(self, payload: Any = None) -> None:
        was_done = self._future.done()
        super()._on_event(payload)
        if not was_done:
            # window listeners are persistent; drop ours after the first hit
            self._unsubscribe(self._on_event)


def arm_load_signal(window: Any) -> LoadSignal:
    """Register a fresh one-shot load signal on a view."""
    signal = LoadSignal(window)
    signal._arm()
    logger.debug(f"Armed {signal.description}")
    return signal


def arm_window_signal(handle: Any) -> WindowSignal:
    """Register a fresh one-shot signal for the next new window."""
    signal = WindowSignal(handle)
    signal._arm()
    logger.debug("Armed new-window signal")
    return signal
