"""Reporter modules for the desktop e2e harness.

Result reporting for humans (rich terminal output) and for CI (JSON, TAP).
"""

from .json_reporter import CIReporter, JSONReporter
from .terminal_reporter import TerminalReporter


__all__ = [
    "TerminalReporter",
    "JSONReporter",
    "CIReporter",
]
