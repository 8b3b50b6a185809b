"""Configuration for the desktop e2e harness.

Two kinds of configuration live here:

- ``HarnessConfig``: how the harness itself behaves (timeouts, where the
  application lives, credentials for the login step).
- ``DesktopConfig``: the JSON config fixture written into the application's
  user-data directory before each launch. Consumed read-only by scenarios.
"""

import json
import os
import shlex
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


TAB_MESSAGING = "TAB_MESSAGING"
TAB_FOCALBOARD = "TAB_FOCALBOARD"
TAB_PLAYBOOKS = "TAB_PLAYBOOKS"

DEFAULT_SERVER_URL = "http://localhost:8065"
ENV_PREFIX = "E2E_"


class TabConfig(BaseModel):
    """One tab (logical view) of a team."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str = Field(..., description="Tab identifier, e.g. TAB_MESSAGING", min_length=1)
    order: int = Field(..., description="Display order within the team", ge=0)
    is_open: bool = Field(True, alias="isOpen", description="Whether the tab is shown")


class TeamConfig(BaseModel):
    """A server/team entry of the application config."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str = Field(..., description="Team display name", min_length=1)
    url: str = Field(..., description="Server URL")
    order: int = Field(..., description="Position in the server list", ge=0)
    tabs: List[TabConfig] = Field(default_factory=list)
    last_active_tab: int = Field(0, alias="lastActiveTab", ge=0)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate the server URL carries a scheme."""
        if "://" not in v:
            raise ValueError(f"Team url must include a scheme: {v!r}")
        return v


class DesktopConfig(BaseModel):
    """Application config fixture (config file format version 3)."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    version: int = 3
    teams: List[TeamConfig] = Field(..., min_length=1)
    show_tray_icon: bool = Field(False, alias="showTrayIcon")
    tray_icon_theme: str = Field("light", alias="trayIconTheme")
    minimize_to_tray: bool = Field(False, alias="minimizeToTray")
    notifications: Dict[str, Any] = Field(
        default_factory=lambda: {"flashWindow": 0, "bounceIcon": False, "bounceIconType": "informational"}
    )
    show_unread_badge: bool = Field(True, alias="showUnreadBadge")
    use_spell_checker: bool = Field(True, alias="useSpellChecker")
    enable_hardware_acceleration: bool = Field(True, alias="enableHardwareAcceleration")
    autostart: bool = True
    hide_on_start: bool = Field(False, alias="hideOnStart")
    spell_checker_locales: List[str] = Field(default_factory=list, alias="spellCheckerLocales")
    dark_mode: bool = Field(False, alias="darkMode")
    last_active_team: int = Field(0, alias="lastActiveTeam", ge=0)
    start_in_fullscreen: bool = Field(False, alias="startInFullscreen")
    auto_check_for_updates: bool = Field(True, alias="autoCheckForUpdates")
    app_language: str = Field("", alias="appLanguage")

    def to_json_dict(self) -> Dict[str, Any]:
        """Dictionary in the on-disk (camelCase) shape."""
        return self.model_dump(by_alias=True)

    def team(self, index: int = 0) -> TeamConfig:
        return self.teams[index]


def default_tabs() -> List[TabConfig]:
    return [
        TabConfig(name=TAB_MESSAGING, order=0, is_open=True),
        TabConfig(name=TAB_FOCALBOARD, order=1, is_open=True),
        TabConfig(name=TAB_PLAYBOOKS, order=2, is_open=True),
    ]


def demo_config(server_url: str = DEFAULT_SERVER_URL) -> DesktopConfig:
    """Two-team fixture: the server under test first, then a public site."""
    return DesktopConfig(
        teams=[
            TeamConfig(name="example", url=server_url, order=0, tabs=default_tabs()),
            TeamConfig(name="github", url="https://github.com/", order=1, tabs=default_tabs()),
        ],
    )


class HarnessConfig:
    """Configuration for harness behavior.

    Attributes:
        app_command: Command line that starts the application under test
        user_data_dir: Directory the application reads its config from
        debug_port: Remote debugging port the harness attaches to
        test_timeout_seconds: Per-scenario timeout (setup through assert)
        cleanup_timeout_seconds: Upper bound on teardown
        launch_timeout_seconds: How long to retry attaching to the app
        wait_timeout_seconds: Default readiness wait timeout
        input_settle_seconds: Window allowed for injected input to take effect
        post_provision_delay_seconds: Pause between writing config and launch
        key_repeat_delay_seconds: Delay between repeated key taps
        log_level: Logging level
        server_url: Chat server the demo config points at
        test_user_name: Login user name
        test_password: Login password
    """

    def __init__(
        self,
        app_command: Optional[List[str]] = None,
        user_data_dir: Optional[Path] = None,
        debug_port: int = 9222,
        test_timeout_seconds: float = 30.0,
        cleanup_timeout_seconds: float = 10.0,
        launch_timeout_seconds: float = 20.0,
        wait_timeout_seconds: float = 10.0,
        input_settle_seconds: float = 0.5,
        post_provision_delay_seconds: float = 1.0,
        key_repeat_delay_seconds: float = 0.05,
        log_level: str = "INFO",
        server_url: str = DEFAULT_SERVER_URL,
        test_user_name: Optional[str] = None,
        test_password: Optional[str] = None,
    ):
        self.app_command = list(app_command) if app_command else ["mattermost-desktop"]
        self.user_data_dir = user_data_dir or Path.home() / ".local/share/desktop-e2e/testUserData"
        self.debug_port = debug_port
        self.test_timeout_seconds = test_timeout_seconds
        self.cleanup_timeout_seconds = cleanup_timeout_seconds
        self.launch_timeout_seconds = launch_timeout_seconds
        self.wait_timeout_seconds = wait_timeout_seconds
        self.input_settle_seconds = input_settle_seconds
        self.post_provision_delay_seconds = post_provision_delay_seconds
        self.key_repeat_delay_seconds = key_repeat_delay_seconds
        self.log_level = log_level
        self.server_url = server_url
        self.test_user_name = test_user_name
        self.test_password = test_password

    @property
    def config_file_path(self) -> Path:
        return self.user_data_dir / "config.json"

    def app_config(self) -> DesktopConfig:
        """Config fixture written before every launch."""
        return demo_config(self.server_url)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "HarnessConfig":
        app_command = data.get("app_command")
        if isinstance(app_command, str):
            app_command = shlex.split(app_command)

        return cls(
            app_command=app_command,
            user_data_dir=Path(data["user_data_dir"]) if data.get("user_data_dir") else None,
            debug_port=int(data.get("debug_port", 9222)),
            test_timeout_seconds=float(data.get("test_timeout_seconds", 30.0)),
            cleanup_timeout_seconds=float(data.get("cleanup_timeout_seconds", 10.0)),
            launch_timeout_seconds=float(data.get("launch_timeout_seconds", 20.0)),
            wait_timeout_seconds=float(data.get("wait_timeout_seconds", 10.0)),
            input_settle_seconds=float(data.get("input_settle_seconds", 0.5)),
            post_provision_delay_seconds=float(data.get("post_provision_delay_seconds", 1.0)),
            key_repeat_delay_seconds=float(data.get("key_repeat_delay_seconds", 0.05)),
            log_level=data.get("log_level", "INFO"),
            server_url=data.get("server_url", DEFAULT_SERVER_URL),
            test_user_name=data.get("test_user_name"),
            test_password=data.get("test_password"),
        )

    @classmethod
    def from_file(cls, config_path: Path) -> "HarnessConfig":
        """Load configuration from JSON file.

        Environment variables still override values from the file.

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config file is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        try:
            with open(config_path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid config file: {e}")

        if not isinstance(data, dict):
            raise ValueError(f"Invalid config file: expected an object, got {type(data).__name__}")

        try:
            return cls.from_mapping({**data, **_env_overrides()})
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid config file: {e}")

    @classmethod
    def from_env(cls) -> "HarnessConfig":
        """Defaults overridden by E2E_* environment variables."""
        return cls.from_mapping(_env_overrides())

    @classmethod
    def default(cls) -> "HarnessConfig":
        return cls()


def _env_overrides() -> Dict[str, str]:
    """Collect E2E_<KEY> variables as lower-case config keys."""
    keys = (
        "app_command", "user_data_dir", "debug_port", "test_timeout_seconds",
        "cleanup_timeout_seconds", "launch_timeout_seconds", "wait_timeout_seconds",
        "input_settle_seconds", "post_provision_delay_seconds",
        "key_repeat_delay_seconds", "log_level", "server_url",
        "test_user_name", "test_password",
    )
    overrides = {}
    for key in keys:
        value = os.environ.get(f"{ENV_PREFIX}{key.upper()}")
        if value:
            overrides[key] = value
    return overrides
