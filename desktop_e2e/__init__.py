"""Desktop E2E - keyboard shortcut end-to-end harness for the desktop chat client.

This package provides:
- Isolated user-data provisioning and application launch
- Level and edge triggered readiness waits
- OS-level keystroke injection
- Scenario lifecycle with guaranteed teardown
- Terminal, JSON and TAP reporting
"""

__version__ = "1.0.0"
__license__ = "MIT"

__all__ = ["__version__", "__license__"]
