"""Scenario base for anything that needs a running application.

Setup provisions a fresh user-data directory, launches the application,
waits for the loading screen to go away and builds the server map.
Cleanup closes the application handle.
"""

from typing import Optional

from ..assertions import WindowAssertions
from ..config import TAB_MESSAGING, DesktopConfig, HarnessConfig
from ..input_synthesizer import InputSynthesizer
from ..launcher import ApplicationHandle, ApplicationLauncher
from ..provisioner import EnvironmentProvisioner
from ..readiness import ElementCondition, wait_for_element
from ..server_map import ServerMap, ServerMapEntry, build_server_map
from ..window_locator import LOADING_SCREEN, wait_for_window
from .base_scenario import BaseScenario


LOADING_SCREEN_SELECTOR = ".LoadingScreen"


class AppScenario(BaseScenario):
    """Shared setup/teardown for scenarios against a launched application.

    Collaborators are created from the config but may be replaced before
    ``run()``; tests substitute fakes this way.
    """

    def __init__(self, config: Optional[HarnessConfig] = None):
        super().__init__(config)
        self.app_config: DesktopConfig = self.config.app_config()
        self.provisioner = EnvironmentProvisioner(self.config.user_data_dir)
        self.launcher = ApplicationLauncher(self.config)
        self.input = InputSynthesizer(repeat_delay_seconds=self.config.key_repeat_delay_seconds)
        self.window_assertions = WindowAssertions(self)
        self.app: Optional[ApplicationHandle] = None
        self.server_map: Optional[ServerMap] = None

    async def setup(self) -> None:
        self.log_info("Provisioning test environment")
        self.provisioner.provision(self.app_config)
        # the application reads its config asynchronously after the write lands
        await self.wait(self.config.post_provision_delay_seconds)

        self.app = await self.launcher.launch()

        timeout = self.config.wait_timeout_seconds
        loading_screen = await wait_for_window(self.app, LOADING_SCREEN, timeout)
        await wait_for_element(loading_screen, LOADING_SCREEN_SELECTOR, ElementCondition.HIDDEN, timeout)
        self.log_info("Loading screen hidden")

        self.server_map = await build_server_map(self.app)

    async def cleanup(self) -> None:
        if self.app is not None:
            await self.app.close()

    def messaging_view(self, team_index: int = 0) -> ServerMapEntry:
        """Messaging tab of a configured team.

        Raises:
            ServerMapKeyError: If the view was never registered
        """
        team = self.app_config.team(team_index)
        return self.server_map.view(team.name, TAB_MESSAGING)
