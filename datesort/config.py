"""
Configuration management for datesort.
"""

from pathlib import Path
from typing import Dict, Optional

import yaml

from .constants import PROGRAM, get_logger


class Config:
    """Manages configuration file for storing user preferences."""

    def __init__(self, config_path: Optional[Path] = None):
        # Default config location: ~/.<PROGRAM>/config.yml
        if config_path:
            self.config_path = Path(config_path)
        else:
            self.config_path = Path.home() / f".{PROGRAM}" / "config.yml"
        self.program_root = self.config_path.parent
        self.data = self._load_config()

    def _load_config(self) -> Dict:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            return {}

        try:
            with open(self.config_path, 'r') as f:
                return yaml.safe_load(f) or {}
        except Exception as e:
            get_logger().warning(f"Could not load config: {e}")
            return {}

    def save_config(self) -> None:
        """Save current configuration to file."""
        try:
            self.program_root.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, 'w') as f:
                yaml.safe_dump(self.data, f, default_flow_style=False)
        except Exception as e:
            get_logger().error(f"Could not save config: {e}")

    def get_last_target(self) -> Optional[str]:
        """Get the last sorted target directory."""
        return self.data.get('last_target')

    def get_logs_dir(self) -> Path:
        """Get the directory for CSV results and run logs."""
        logs_dir = self.data.get('logs_dir')
        return Path(logs_dir).expanduser() if logs_dir else self.program_root / "logs"

    def get_date_order(self) -> str:
        """Get the preferred reading of numeric dates (default: DMY)."""
        return self.data.get('date_order', 'DMY')

    def get_timezone(self) -> Optional[str]:
        """Get the timezone for offset-aware metadata (default: system local)."""
        return self.data.get('timezone')

    def get_write_log(self) -> bool:
        """Get whether a run log file is written (default: True)."""
        return self.data.get('write_log', True)

    def update_target(self, target: str) -> None:
        self.data['last_target'] = target
        self.save_config()

    def update_logs_dir(self, logs_dir: str) -> None:
        self.data['logs_dir'] = logs_dir
        self.save_config()

    def update_date_order(self, date_order: str) -> None:
        self.data['date_order'] = date_order
        self.save_config()

    def update_timezone(self, timezone: str) -> None:
        self.data['timezone'] = timezone
        self.save_config()
