"""View menu keyboard shortcut scenarios.

Search focus, page reload (plain and hard) and the dev tools toggle, each
driven by OS-level key taps against a freshly launched application.
"""

from typing import Optional, Sequence

from ..errors import WaitTimeoutError
from ..input_synthesizer import platform_modifiers, primary_modifier
from ..login import login
from ..models import AssertionType
from ..readiness import (
    ElementCondition,
    LoadSignal,
    WindowSignal,
    arm_load_signal,
    arm_window_signal,
    poll_until,
    wait_for_element,
)
from ..window_locator import MAIN_WINDOW, find_window_by_url
from .app_scenario import AppScenario


SEARCH_BOX = "#searchBox"
SEARCH_PREFIX = "in:"
DEVTOOLS_TITLE = "DevTools"


class SearchBoxShortcut(AppScenario):
    """Ctrl/Cmd+F focuses the search box of the active server view."""

    scenario_id = "view_menu_001"
    name = "Control+F focuses the search bar"
    description = "Primary modifier + F moves focus to #searchBox, prefilled with 'in:'"
    priority = 1

    async def setup(self) -> None:
        await super().setup()
        self.view = self.messaging_view()
        await login(
            self.view.window,
            self.config.test_user_name,
            self.config.test_password,
            self.config.wait_timeout_seconds,
        )
        await wait_for_element(
            self.view.window, SEARCH_BOX, ElementCondition.VISIBLE, self.config.wait_timeout_seconds
        )

    async def execute(self) -> None:
        window = self.view.window
        await window.bring_to_front()
        await self.input.key_tap("f", [primary_modifier()])

        async def search_ready() -> bool:
            if not await self.window_assertions.is_focused(window, SEARCH_BOX):
                return False
            return SEARCH_PREFIX in await window.input_value(SEARCH_BOX)

        try:
            await poll_until(
                search_ready,
                self.config.input_settle_seconds,
                description=SEARCH_BOX,
                condition=f"focused containing {SEARCH_PREFIX!r}",
            )
        except WaitTimeoutError as e:
            self.log_warning(f"Search box not ready after shortcut: {e}")

    async def validate(self) -> None:
        window = self.view.window
        await self.window_assertions.assert_focused(window, SEARCH_BOX)
        await self.window_assertions.assert_input_contains(window, SEARCH_BOX, SEARCH_PREFIX)


class ReloadShortcut(AppScenario):
    """Ctrl+R reloads the active server view exactly once."""

    scenario_id = "view_menu_002"
    name = "Control+R reloads the page"
    description = "Ctrl+R triggers one load completion for the messaging view"
    priority = 2
    modifiers: Sequence[str] = ("control",)

    def __init__(self, config=None):
        super().__init__(config)
        self.load_signal: Optional[LoadSignal] = None

    async def execute(self) -> None:
        self.view = self.messaging_view()
        await self.view.window.bring_to_front()

        # edge-triggered: must be armed before the key tap
        self.load_signal = arm_load_signal(self.view.window)
        await self.input.key_tap("r", self.modifiers)

    async def validate(self) -> None:
        try:
            await self.load_signal.wait(self.config.wait_timeout_seconds)
        except WaitTimeoutError as e:
            self.log_warning(str(e))

        self.assert_true(
            "load_fired",
            AssertionType.LOAD_SIGNAL_FIRED,
            self.load_signal.fired,
            f"View {self.view.content_id} should finish loading after the shortcut",
        )

        # a second, fresh signal must stay silent: one tap, one reload
        followup = arm_load_signal(self.view.window)
        await self.wait(self.config.input_settle_seconds)
        reloaded_again = followup.fired
        followup.cancel()

        self.assert_equals(
            "single_load",
            AssertionType.NO_DUPLICATE_LOAD,
            False,
            reloaded_again,
            f"View {self.view.content_id} should load exactly once",
        )

    async def cleanup(self) -> None:
        if self.load_signal is not None:
            self.load_signal.cancel()
        await super().cleanup()


class HardReloadShortcut(ReloadShortcut):
    """Ctrl+Shift+R reloads the active server view exactly once."""

    scenario_id = "view_menu_003"
    name = "Control+Shift+R reloads the page"
    description = "Ctrl+Shift+R triggers one load completion for the messaging view"
    modifiers = ("control", "shift")


class DevToolsShortcut(AppScenario):
    """The platform dev tools shortcut opens a DevTools window."""

    scenario_id = "view_menu_004"
    name = "Dev tools shortcut opens DevTools"
    description = "Cmd+Alt+I (macOS) or Shift+Ctrl+I opens a window titled 'DevTools'"
    priority = 2

    mac_modifiers = ("command", "alt")
    other_modifiers = ("shift", "control")

    def __init__(self, config=None):
        super().__init__(config)
        self.window_signal: Optional[WindowSignal] = None

    async def execute(self) -> None:
        main_window = find_window_by_url(self.app, MAIN_WINDOW) or await self.app.first_window()
        await main_window.bring_to_front()

        self.window_signal = arm_window_signal(self.app)
        await self.input.key_taps(1, "i", platform_modifiers(self.mac_modifiers, self.other_modifiers))

    async def validate(self) -> None:
        try:
            window = await self.window_signal.wait(self.config.wait_timeout_seconds)
        except WaitTimeoutError as e:
            self.log_warning(str(e))
            window = None

        self.assert_true(
            "window_opened",
            AssertionType.WINDOW_OPENED,
            window is not None,
            "Dev tools shortcut should open a new window",
        )

        self.add_artifact("devtools_url", window.url)
        await window.wait_for_load_state()
        await self.window_assertions.assert_title_equals(window, DEVTOOLS_TITLE)

    async def cleanup(self) -> None:
        if self.window_signal is not None:
            self.window_signal.cancel()
        await super().cleanup()
