"""Application launcher and handle.

The application under test is an Electron-style desktop client. It is
started with a remote debugging port and the harness attaches to it over
CDP with Playwright, so every renderer (main window, loading screen, one
view per team tab, dev tools) shows up as a page.
"""

import asyncio
import logging
from typing import Any, Callable, List, Optional

from playwright.async_api import Browser, Error as PlaywrightError, Page, Playwright, async_playwright

from .config import HarnessConfig
from .errors import SetupFailure
from .readiness import poll_until


logger = logging.getLogger(__name__)


class ApplicationHandle:
    """A launched application: its process and its CDP connection.

    Lifetime is one scenario. ``close()`` is idempotent, so a teardown that
    runs after a partially failed setup is always safe.
    """

    def __init__(
        self,
        process: Optional[asyncio.subprocess.Process],
        playwright: Optional[Playwright],
        browser: Optional[Browser],
        terminate_timeout: float = 5.0,
    ):
        self.process = process
        self.playwright = playwright
        self.browser = browser
        self.terminate_timeout = terminate_timeout
        self._window_listeners: List[Callable] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _contexts(self) -> List[Any]:
        return list(self.browser.contexts) if self.browser is not None else []

    def windows(self) -> List[Page]:
        """All open windows and views, across browser contexts."""
        return [page for context in self._contexts() for page in context.pages]

    async def first_window(self, timeout: float = 10.0) -> Page:
        async def any_window() -> Optional[Page]:
            windows = self.windows()
            return windows[0] if windows else None

        return await poll_until(any_window, timeout, description="application", condition="showing a window")

    def add_window_listener(self, callback: Callable[[Page], Any]) -> None:
        """Call ``callback`` for every window opened from now on."""
        self._window_listeners.append(callback)
        for context in self._contexts():
            context.on("page", callback)

    def remove_window_listener(self, callback: Callable[[Page], Any]) -> None:
        if callback not in self._window_listeners:
            return
        self._window_listeners.remove(callback)
        for context in self._contexts():
            try:
                context.remove_listener("page", callback)
            except KeyError:
                pass

    async def close(self) -> None:
        """Disconnect and stop the application. Safe to call repeatedly."""
        if self._closed:
            return
        self._closed = True

        try:
            for callback in list(self._window_listeners):
                self.remove_window_listener(callback)

            if self.browser is not None:
                try:
                    await self.browser.close()
                except PlaywrightError as e:
                    logger.warning(f"Error closing CDP connection: {e}")
        finally:
            try:
                await self._stop_process()
            finally:
                if self.playwright is not None:
                    await self.playwright.stop()

        logger.info("Application closed")

    async def _stop_process(self) -> None:
        """Terminate, then kill if it outlives ``terminate_timeout``."""
        if self.process is None or self.process.returncode is not None:
            return

        try:
            self.process.terminate()
        except ProcessLookupError:
            return

        try:
            await asyncio.wait_for(self.process.wait(), self.terminate_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Application pid {self.process.pid} did not exit, killing")
            self.process.kill()
            await self.process.wait()


class ApplicationLauncher:
    """Start the application and attach to it."""

    def __init__(self, config: HarnessConfig):
        self.config = config

    def command(self) -> List[str]:
        return [
            *self.config.app_command,
            f"--remote-debugging-port={self.config.debug_port}",
            f"--user-data-dir={self.config.user_data_dir}",
        ]

    @property
    def endpoint(self) -> str:
        return f"http://127.0.0.1:{self.config.debug_port}"

    async def launch(self) -> ApplicationHandle:
        """Launch the application and return a connected handle.

        Raises:
            SetupFailure: If the process cannot start or never accepts CDP
        """
        cmd = self.command()
        logger.info(f"Launching: {' '.join(cmd)}")

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as e:
            raise SetupFailure(f"Failed to start application: {e}", step="launch")

        playwright: Optional[Playwright] = None

        async def try_connect() -> Optional[Browser]:
            if process.returncode is not None:
                raise SetupFailure(
                    f"Application exited with code {process.returncode} during startup",
                    step="launch",
                )
            try:
                return await playwright.chromium.connect_over_cdp(self.endpoint)
            except PlaywrightError as e:
                logger.debug(f"CDP not ready yet: {e}")
                return None

        try:
            playwright = await async_playwright().start()
            browser = await poll_until(
                try_connect,
                self.config.launch_timeout_seconds,
                description=self.endpoint,
                condition="accepting connections",
                initial_interval=0.1,
            )
        except asyncio.CancelledError:
            await ApplicationHandle(process, playwright, None).close()
            raise
        except Exception as e:
            # nothing owns the process yet; release it before reporting
            await ApplicationHandle(process, playwright, None).close()
            if isinstance(e, SetupFailure):
                raise
            raise SetupFailure(f"Could not attach to application: {e}", step="launch") from e

        logger.info(f"Attached to application pid {process.pid}")
        return ApplicationHandle(process, playwright, browser)

