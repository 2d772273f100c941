"""
Configuration loader for HeritageDesk.

Loads settings from config.yaml and provides typed access to configuration values.
"""

import logging
import os
from pathlib import Path
from typing import Any, cast

import yaml

logger = logging.getLogger("HeritageDesk")

CONFIG_ENV_VAR = "HERITAGEDESK_CONFIG"


class Config:
    """
    Singleton configuration loader.

    Loads config.yaml once and provides access to all settings.
    """

    _instance: "Config | None" = None
    _config: dict[str, Any] | None = None

    def __new__(cls) -> "Config":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._load_config()
        return cls._instance

    def _load_config(self) -> None:
        """Load configuration from config.yaml (or $HERITAGEDESK_CONFIG)."""
        override = os.environ.get(CONFIG_ENV_VAR)
        config_path = Path(override) if override else self._find_project_root() / "config.yaml"
        if not config_path.exists():
            logger.warning(f"Config file not found at {config_path}, using defaults")
            self._config = {}
            return
        with open(config_path, encoding="utf-8") as f:
            self._config = yaml.safe_load(f) or {}

    @staticmethod
    def _find_project_root() -> Path:
        """Find project root by searching for pyproject.toml."""
        current = Path(__file__).resolve().parent
        for _ in range(10):  # Prevent infinite loop
            if (current / "pyproject.toml").exists():
                return current
            if current.parent == current:
                break
            current = current.parent
        # Fallback: assume standard src layout (4 levels up from utils/config.py)
        return Path(__file__).resolve().parent.parent.parent.parent

    def get(self, *keys: str, default: Any = None) -> Any:
        """
        Get a nested configuration value.

        Args:
            *keys: Path to the config value (e.g., 'api', 'base_url')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        value = self._config
        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default
        return value

    # Convenience properties for common settings
    @property
    def api_base_url(self) -> str:
        result = self.get("api", "base_url", default="http://localhost:8000/api")
        return cast(str, result).rstrip("/")

    @property
    def api_key(self) -> str | None:
        result = os.environ.get("HERITAGEDESK_API_KEY") or self.get("api", "api_key")
        return cast("str | None", result)

    @property
    def http_timeout(self) -> int:
        result = self.get("api", "timeout", default=15)
        return cast(int, result)

    @property
    def user_agent(self) -> str:
        result = self.get("api", "user_agent", default="HeritageDesk/1.0")
        return cast(str, result)

    @property
    def default_country(self) -> str:
        result = self.get("defaults", "country", default="India")
        return cast(str, result)

    @property
    def currency(self) -> str:
        result = self.get("defaults", "currency", default="INR")
        return cast(str, result)

    @property
    def autosave_delay(self) -> float:
        result = self.get("editor", "autosave_delay", default=0.9)
        return cast(float, result)

    @property
    def auto_translate(self) -> bool:
        result = self.get("translation", "enabled", default=False)
        return cast(bool, result)


# Global config instance
config = Config()
