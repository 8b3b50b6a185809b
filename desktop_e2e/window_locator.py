"""Locate windows and views of a running application."""

import logging
from typing import Any, Callable, Optional

from .readiness import poll_until


logger = logging.getLogger(__name__)


LOADING_SCREEN = "loadingScreen"
MAIN_WINDOW = "index"


def find_window(handle: Any, predicate: Callable[[Any], bool]) -> Optional[Any]:
    """First window matching ``predicate``, or None."""
    return next((w for w in handle.windows() if predicate(w)), None)


def find_window_by_url(handle: Any, fragment: str) -> Optional[Any]:
    """First window whose URL contains ``fragment``, or None."""
    return find_window(handle, lambda w: fragment in w.url)


async def wait_for_window(handle: Any, fragment: str, timeout: float = 10.0) -> Any:
    """Wait until a window whose URL contains ``fragment`` is open.

    Raises:
        WaitTimeoutError: If no such window appears
    """
    async def lookup() -> Optional[Any]:
        return find_window_by_url(handle, fragment)

    window = await poll_until(lookup, timeout, description=f"window '{fragment}'", condition="open")
    logger.debug(f"Found window {window.url}")
    return window


def find_view(server_map: Any, content_id: int) -> Any:
    """Window hosting the view with the given content id.

    Raises:
        ServerMapKeyError: If no registered view has that id
    """
    return server_map.find_by_content_id(content_id).window
