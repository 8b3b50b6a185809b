"""Environment provisioning for scenarios.

Resets the application's user-data directory and writes a fresh config
fixture before every launch so no state crosses scenario boundaries.
"""

import json
import logging
import shutil
from pathlib import Path
from typing import Any, Mapping, Union

from .config import DesktopConfig
from .errors import SetupFailure


logger = logging.getLogger(__name__)


class EnvironmentProvisioner:
    """Prepare on-disk state for one application launch.

    Attributes:
        user_data_dir: Application user-data directory
        config_file_path: Location of the application config file
    """

    def __init__(self, user_data_dir: Path, config_file_name: str = "config.json"):
        self.user_data_dir = Path(user_data_dir)
        self.config_file_path = self.user_data_dir / config_file_name

    def clean_data_dir(self) -> None:
        """Remove the user-data directory and everything under it."""
        try:
            shutil.rmtree(self.user_data_dir)
            logger.debug(f"Removed data dir {self.user_data_dir}")
        except FileNotFoundError:
            pass
        except OSError as e:
            raise SetupFailure(f"Failed to clean data dir {self.user_data_dir}: {e}", step="provision")

    def create_test_user_data_dir(self) -> None:
        try:
            self.user_data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise SetupFailure(f"Failed to create data dir {self.user_data_dir}: {e}", step="provision")

    def clean_test_config(self) -> None:
        """Delete the config file if a previous run left one behind."""
        try:
            self.config_file_path.unlink(missing_ok=True)
        except OSError as e:
            raise SetupFailure(f"Failed to remove config {self.config_file_path}: {e}", step="provision")

    def write_config(self, config: Union[DesktopConfig, Mapping[str, Any]]) -> Path:
        """Write the config fixture as JSON.

        Args:
            config: Config model or an already JSON-shaped mapping

        Returns:
            Path of the written file
        """
        if isinstance(config, DesktopConfig):
            data = config.to_json_dict()
        else:
            data = dict(config)

        try:
            self.config_file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file_path, "w") as f:
                json.dump(data, f)
        except (OSError, TypeError) as e:
            raise SetupFailure(f"Failed to write config {self.config_file_path}: {e}", step="provision")

        logger.info(f"Wrote config with {len(data.get('teams', []))} team(s) to {self.config_file_path}")
        return self.config_file_path

    def provision(self, config: Union[DesktopConfig, Mapping[str, Any]]) -> Path:
        """Reset all state and write a fresh config, in launch order."""
        self.clean_data_dir()
        self.create_test_user_data_dir()
        self.clean_test_config()
        return self.write_config(config)
