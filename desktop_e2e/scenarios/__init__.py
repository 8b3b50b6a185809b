"""Scenario modules for the desktop e2e harness.

This package provides the scenario lifecycle base classes and the
concrete keyboard shortcut scenarios.
"""

from .app_scenario import AppScenario
from .base_scenario import BaseScenario
from .view_menu import (
    DevToolsShortcut,
    HardReloadShortcut,
    ReloadShortcut,
    SearchBoxShortcut,
)


# All available scenarios
ALL_SCENARIOS = [
    SearchBoxShortcut,
    ReloadShortcut,
    HardReloadShortcut,
    DevToolsShortcut,
]


__all__ = [
    "BaseScenario",
    "AppScenario",
    # View menu shortcuts
    "SearchBoxShortcut",
    "ReloadShortcut",
    "HardReloadShortcut",
    "DevToolsShortcut",
    # Collection
    "ALL_SCENARIOS",
]
