"""
Configuration management for MOLDPLAN

Handles loading and validation of configuration from YAML files and environment variables.
A ``Config`` is created by the caller and passed explicitly to the components
that need it; there is no process-wide instance.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional
import yaml
from dotenv import load_dotenv

from moldplan.constants import LOG_LEVEL_DEFAULT
from moldplan.core.models import SchedulingSettings
from moldplan.utils.logging_config import setup_logging

# Load environment variables
load_dotenv()

# Environment variable -> (config key, type)
ENV_OVERRIDES = {
    "MOLDPLAN_LOG_LEVEL": ("logging.level", str),
    "MOLDPLAN_LOG_FILE": ("logging.file", str),
    "MOLDPLAN_SETUP_TIME_MINUTES": ("scheduling.setup_time_minutes", float),
    "MOLDPLAN_WORK_HOURS_PER_DAY": ("scheduling.work_hours_per_day", float),
    "MOLDPLAN_WORK_START_HOUR": ("scheduling.work_start_hour", int),
    "MOLDPLAN_PREDICTION_ERROR_THRESHOLD": ("scheduling.prediction_error_threshold", float),
    "MOLDPLAN_UNIT_PRICE": ("scheduling.unit_price", float),
}


class Config:
    """Configuration manager for MOLDPLAN"""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration

        Args:
            config_path: Path to YAML configuration file. If None, uses default config.
        """
        self.config_path = config_path or self._get_default_config_path()
        self.config = self._load_config()

    def _get_default_config_path(self) -> str:
        """Get path to default configuration file"""
        return str(Path(__file__).parent.parent / "configs" / "default.yaml")

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file"""
        if not os.path.exists(self.config_path):
            # Fall back to built-in defaults if file doesn't exist
            config = self._get_minimal_config()
        else:
            with open(self.config_path, "r") as f:
                config = yaml.safe_load(f) or {}

        # Override with environment variables
        config = self._apply_env_overrides(config)
        return config

    def _get_minimal_config(self) -> Dict[str, Any]:
        """Return minimal default configuration"""
        defaults = SchedulingSettings()
        return {
            "logging": {
                "level": LOG_LEVEL_DEFAULT,
                "file": None,
            },
            "scheduling": {
                "setup_time_minutes": defaults.setup_time_minutes,
                "work_hours_per_day": defaults.work_hours_per_day,
                "work_start_hour": defaults.work_start_hour,
                "delivery_buffer_days": defaults.delivery_buffer_days,
                "prediction_error_threshold": defaults.prediction_error_threshold,
                "shifts_per_day": defaults.shifts_per_day,
                "unit_price": defaults.unit_price,
                "default_hourly_rate": defaults.default_hourly_rate,
                "default_material_cost_per_kg": defaults.default_material_cost_per_kg,
            },
            "data": {
                "snapshot_path": "data/snapshot.json",
                "output_path": "data/outputs/",
            },
        }

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides"""
        for env_name, (key, cast) in ENV_OVERRIDES.items():
            raw = os.getenv(env_name)
            if raw:
                self._set_in(config, key, cast(raw))
        return config

    @staticmethod
    def _set_in(config: Dict[str, Any], key: str, value: Any) -> None:
        keys = key.split(".")
        for k in keys[:-1]:
            if not isinstance(config.get(k), dict):
                config[k] = {}
            config = config[k]
        config[keys[-1]] = value

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by key (supports nested keys with dot notation)

        Args:
            key: Configuration key (e.g., "scheduling.work_hours_per_day")
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split(".")
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value: Any) -> None:
        """
        Set configuration value by key (supports nested keys with dot notation)

        Args:
            key: Configuration key (e.g., "scheduling.unit_price")
            value: Value to set
        """
        self._set_in(self.config, key, value)

    def save(self, path: Optional[str] = None) -> None:
        """
        Save configuration to YAML file

        Args:
            path: Path to save configuration. If None, uses original config_path
        """
        save_path = path or self.config_path
        directory = os.path.dirname(save_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        with open(save_path, "w") as f:
            yaml.dump(self.config, f, default_flow_style=False, indent=2)

    def scheduling_settings(self) -> SchedulingSettings:
        """Settings snapshot built from the ``scheduling`` section"""
        return SchedulingSettings.from_dict(self.get("scheduling", {}))

    def configure_logging(self) -> List[int]:
        """Install log sinks from the ``logging`` section"""
        return setup_logging(
            level=self.get("logging.level") or LOG_LEVEL_DEFAULT,
            log_file=self.get("logging.file"),
        )
