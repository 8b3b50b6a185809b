"""Unit tests for harness configuration and the application config fixture."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from desktop_e2e.config import (
    DesktopConfig,
    HarnessConfig,
    TabConfig,
    TeamConfig,
    demo_config,
)


class TestDesktopConfig:
    """Pydantic config fixture models."""

    def test_demo_config_shape(self):
        config = demo_config("http://chat.test:8065")

        assert config.version == 3
        assert config.team(0).name == "example"
        assert config.team(0).url == "http://chat.test:8065"
        assert [tab.name for tab in config.team(1).tabs] == [
            "TAB_MESSAGING",
            "TAB_FOCALBOARD",
            "TAB_PLAYBOOKS",
        ]

    def test_dump_uses_camel_case(self):
        data = demo_config().to_json_dict()

        assert "showTrayIcon" in data
        assert "lastActiveTeam" in data
        assert "show_tray_icon" not in data

    def test_parse_camel_case(self):
        config = DesktopConfig.model_validate({
            "teams": [{"name": "a", "url": "http://a", "order": 0, "lastActiveTab": 1}],
            "darkMode": True,
        })

        assert config.dark_mode is True
        assert config.team().last_active_tab == 1

    def test_requires_a_team(self):
        with pytest.raises(ValidationError):
            DesktopConfig(teams=[])

    def test_url_needs_scheme(self):
        with pytest.raises(ValidationError):
            TeamConfig(name="a", url="localhost:8065", order=0)

    def test_frozen(self):
        tab = TabConfig(name="TAB_MESSAGING", order=0)

        with pytest.raises(ValidationError):
            tab.order = 1


class TestHarnessConfig:
    """Harness config loading."""

    def test_defaults(self):
        config = HarnessConfig.default()

        assert config.test_timeout_seconds == 30.0
        assert config.post_provision_delay_seconds == 1.0
        assert config.input_settle_seconds == 0.5
        assert config.config_file_path == config.user_data_dir / "config.json"

    def test_from_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("E2E_DEBUG_PORT", raising=False)
        path = tmp_path / "e2e.json"
        path.write_text(json.dumps({
            "app_command": "/opt/Mattermost/mattermost-desktop --no-sandbox",
            "user_data_dir": str(tmp_path / "data"),
            "debug_port": 9333,
        }))

        config = HarnessConfig.from_file(path)

        assert config.app_command == ["/opt/Mattermost/mattermost-desktop", "--no-sandbox"]
        assert config.user_data_dir == tmp_path / "data"
        assert config.debug_port == 9333

    def test_from_file_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            HarnessConfig.from_file(tmp_path / "missing.json")

    def test_from_file_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")

        with pytest.raises(ValueError, match="Invalid config file"):
            HarnessConfig.from_file(path)

    def test_from_file_not_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")

        with pytest.raises(ValueError, match="expected an object"):
            HarnessConfig.from_file(path)

    def test_from_file_bad_value(self, tmp_path):
        path = tmp_path / "bad_port.json"
        path.write_text(json.dumps({"debug_port": "not-a-port"}))

        with pytest.raises(ValueError):
            HarnessConfig.from_file(path)

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "e2e.json"
        path.write_text(json.dumps({"debug_port": 9333}))
        monkeypatch.setenv("E2E_DEBUG_PORT", "9444")

        assert HarnessConfig.from_file(path).debug_port == 9444

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("E2E_TEST_USER_NAME", "sysadmin")
        monkeypatch.setenv("E2E_USER_DATA_DIR", "/tmp/e2e-data")

        config = HarnessConfig.from_env()

        assert config.test_user_name == "sysadmin"
        assert config.user_data_dir == Path("/tmp/e2e-data")

    def test_app_config_follows_server_url(self):
        config = HarnessConfig(server_url="http://chat.test")

        assert config.app_config().team(0).url == "http://chat.test"
