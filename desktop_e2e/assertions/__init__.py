"""Assertion modules for the desktop e2e harness.

This package provides assertions that read observable window and element
state and record the outcome on the running scenario.
"""

from .window_assertions import WindowAssertions


__all__ = [
    "WindowAssertions",
]
