"""Unit tests for the login step and window assertions."""

import pytest

from desktop_e2e.assertions import WindowAssertions
from desktop_e2e.config import HarnessConfig
from desktop_e2e.errors import AssertionFailure, SetupFailure, WaitTimeoutError
from desktop_e2e.login import LOGIN_ID_INPUT, PASSWORD_INPUT, SUBMIT_BUTTON, login
from desktop_e2e.models import ResultStatus
from desktop_e2e.scenarios.base_scenario import BaseScenario

from ..fixtures import FakeElement, FakePage


class RecorderScenario(BaseScenario):
    scenario_id = "recorder_001"
    name = "Recorder"

    async def setup(self):
        pass

    async def execute(self):
        pass

    async def validate(self):
        pass

    async def cleanup(self):
        pass


def _login_page(visible=True):
    return FakePage("http://localhost:8065/login", elements={LOGIN_ID_INPUT: FakeElement(visible=visible)})


class TestLogin:
    """Login form submission."""

    @pytest.mark.asyncio
    async def test_fills_and_submits(self):
        page = _login_page()

        await login(page, "sysadmin", "secret", timeout=0.1)

        assert page.filled == {LOGIN_ID_INPUT: "sysadmin", PASSWORD_INPUT: "secret"}
        assert page.clicked == [SUBMIT_BUTTON]

    @pytest.mark.asyncio
    async def test_missing_credentials(self):
        with pytest.raises(SetupFailure) as exc_info:
            await login(_login_page(), None, "secret")

        assert exc_info.value.step == "login"

    @pytest.mark.asyncio
    async def test_form_never_shows(self):
        with pytest.raises(WaitTimeoutError):
            await login(_login_page(visible=False), "sysadmin", "secret", timeout=0.1)


class TestWindowAssertions:
    """Assertions recorded on the scenario."""

    @pytest.fixture
    def scenario(self):
        return RecorderScenario(HarnessConfig())

    @pytest.mark.asyncio
    async def test_focused(self, scenario):
        page = FakePage("http://x/", elements={"#searchBox": FakeElement()})
        page.focused = "#searchBox"
        assertions = WindowAssertions(scenario)

        await assertions.assert_focused(page, "#searchBox")

        result = scenario._assertion_results[0]
        assert result.status == ResultStatus.PASSED
        assert result.assertion_id == "assert_001"

    @pytest.mark.asyncio
    async def test_not_focused(self, scenario):
        page = FakePage("http://x/", elements={"#searchBox": FakeElement()})

        with pytest.raises(AssertionFailure):
            await WindowAssertions(scenario).assert_focused(page, "#searchBox")

    @pytest.mark.asyncio
    async def test_input_contains(self, scenario):
        page = FakePage("http://x/", elements={"#searchBox": FakeElement(value="in: town-square ")})
        assertions = WindowAssertions(scenario)

        await assertions.assert_input_contains(page, "#searchBox", "in:")

        page.elements["#searchBox"].value = ""
        with pytest.raises(AssertionFailure):
            await assertions.assert_input_contains(page, "#searchBox", "in:")

        assert [r.assertion_id for r in scenario._assertion_results] == ["assert_001", "assert_002"]

    @pytest.mark.asyncio
    async def test_title_equals(self, scenario):
        assertions = WindowAssertions(scenario)

        await assertions.assert_title_equals(FakePage("devtools://x", title="DevTools"), "DevTools")

        with pytest.raises(AssertionFailure) as exc_info:
            await assertions.assert_title_equals(FakePage("devtools://x", title="DevTools - x"), "DevTools")

        assert exc_info.value.actual == "DevTools - x"
