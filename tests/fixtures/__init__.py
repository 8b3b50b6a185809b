"""Test fixtures package for the desktop e2e harness."""

from .fake_app import (
    FakeApp,
    FakeBrowser,
    FakeContext,
    FakeElement,
    FakeEmitter,
    FakeInput,
    FakeLauncher,
    FakePage,
)

__all__ = [
    "FakeApp",
    "FakeBrowser",
    "FakeContext",
    "FakeElement",
    "FakeEmitter",
    "FakeInput",
    "FakeLauncher",
    "FakePage",
]
