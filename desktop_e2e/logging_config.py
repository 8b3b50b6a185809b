"""Logging configuration for the desktop e2e harness.

Provides:
- Configurable log levels (WARNING, INFO, DEBUG)
- Colored output on terminals
- Logging of injected subprocess calls
"""

import logging
import sys
from typing import Any, Optional


DEFAULT_FORMAT = "%(levelname)s: %(message)s"
VERBOSE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEBUG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s"

ROOT_LOGGER = "desktop_e2e"


class ColoredFormatter(logging.Formatter):
    """Colored log formatter for terminal output."""

    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        # Work on a copy so other handlers see the plain level name
        record = logging.makeLogRecord(record.__dict__)
        if record.levelname in self.COLORS:
            record.levelname = f"{self.COLORS[record.levelname]}{record.levelname}{self.RESET}"
        return super().format(record)


def setup_logging(
    verbose: bool = False,
    debug: bool = False,
    level: Optional[str] = None,
) -> logging.Logger:
    """Configure the harness logger.

    Args:
        verbose: Enable INFO level with timestamps
        debug: Enable DEBUG level with line numbers
        level: Explicit level name; used when neither flag is set

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.handlers.clear()

    if debug:
        logger.setLevel(logging.DEBUG)
        log_format = DEBUG_FORMAT
    elif verbose:
        logger.setLevel(logging.INFO)
        log_format = VERBOSE_FORMAT
    else:
        logger.setLevel(getattr(logging, (level or "WARNING").upper(), logging.WARNING))
        log_format = DEFAULT_FORMAT

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(logger.level)

    if sys.stderr.isatty():
        formatter = ColoredFormatter(log_format)
    else:
        formatter = logging.Formatter(log_format)

    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.propagate = False

    return logger


def log_subprocess_call(cmd: list, result: Any, logger: logging.Logger) -> None:
    """Log subprocess call with result."""
    logger.debug(f"Subprocess call: {' '.join(cmd)}")
    logger.debug(f"  Return code: {result.returncode}")

    stderr = getattr(result, "stderr", None)
    if stderr:
        stderr = stderr if isinstance(stderr, str) else stderr.decode()
        logger.debug(f"  stderr: {stderr[:200]}")
