"""Pytest configuration and fixtures for desktop e2e harness tests."""

import logging
from pathlib import Path

import pytest

from desktop_e2e.config import HarnessConfig
from desktop_e2e.logging_config import ROOT_LOGGER

from .fixtures import FakeApp, FakeInput, FakeLauncher


@pytest.fixture(autouse=True)
def reset_harness_logger():
    """Undo setup_logging() so handlers never outlive a captured stream."""
    yield
    logger = logging.getLogger(ROOT_LOGGER)
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def harness_config(tmp_path: Path) -> HarnessConfig:
    """Fast config: no post-write pause, short waits, credentials set."""
    return HarnessConfig(
        app_command=["fake-desktop"],
        user_data_dir=tmp_path / "testUserData",
        test_timeout_seconds=5.0,
        cleanup_timeout_seconds=1.0,
        wait_timeout_seconds=0.3,
        input_settle_seconds=0.05,
        post_provision_delay_seconds=0.0,
        key_repeat_delay_seconds=0.0,
        test_user_name="sysadmin",
        test_password="Sys@dmin-sample1",
    )


@pytest.fixture
def fake_app() -> FakeApp:
    return FakeApp()


@pytest.fixture
def fake_input() -> FakeInput:
    return FakeInput()


@pytest.fixture
def install_fakes(fake_app, fake_input):
    """Swap a scenario's launcher and input for fakes."""
    def install(scenario, app=None, launcher=None):
        scenario.launcher = launcher or FakeLauncher(app or fake_app)
        scenario.input = fake_input
        return scenario

    return install
