"""
Configuration management for haulbook.

Handles loading and accessing:
- Business configuration (config.yaml): operating cost constants
- Environment variables (data file location, log level, lease toggle)
"""

import os
from decimal import Decimal
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


class OperatingCosts(BaseModel):
    """Cost constants used by every profit calculation."""

    variable_cost_per_mile: Decimal = Decimal("0.372")
    fixed_costs_weekly: Decimal = Decimal("277")
    truck_payment_weekly: Decimal = Decimal("835")

    @field_validator("*", mode="before")
    @classmethod
    def _exact_decimal(cls, value: Any) -> Any:
        # YAML hands us floats; go through str so 0.372 stays 0.372
        if isinstance(value, float):
            return Decimal(str(value))
        return value

    def weekly_fixed(self, include_lease: bool) -> Decimal:
        """Full weekly fixed cost, with the truck payment when the lease is included."""
        if include_lease:
            return self.fixed_costs_weekly + self.truck_payment_weekly
        return self.fixed_costs_weekly


class EnvironmentSettings(BaseSettings):
    """Environment variables configuration."""

    data_file: Path = Field(
        default_factory=lambda: Path.home() / ".haulbook" / "records.json",
        alias="HAULBOOK_DATA_FILE",
    )
    log_level: str = Field("WARNING", alias="HAULBOOK_LOG_LEVEL")
    include_lease: bool = Field(False, alias="HAULBOOK_INCLUDE_LEASE")

    class Config:
        """Pydantic configuration."""

        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


class ConfigManager:
    """
    Central configuration manager for haulbook.

    Loads and provides access to:
    - Business configuration from config/config.yaml
    - Environment variables from .env
    """

    def __init__(self, config_dir: Optional[Path] = None) -> None:
        """
        Initialize the configuration manager.

        Args:
            config_dir: Optional path to config directory. Defaults to
                HAULBOOK_CONFIG_DIR, then project root/config.
        """
        if config_dir is None:
            env_dir = os.getenv("HAULBOOK_CONFIG_DIR")
            if env_dir:
                config_dir = Path(env_dir)
            else:
                project_root = Path(__file__).parent.parent.parent
                config_dir = project_root / "config"

        self.config_dir = config_dir
        self._business_config: Optional[dict[str, Any]] = None
        self._env_settings: Optional[EnvironmentSettings] = None
        self._operating_costs: Optional[OperatingCosts] = None

    @property
    def business_config(self) -> dict[str, Any]:
        """Load and return business configuration from config.yaml."""
        if self._business_config is None:
            config_path = self.config_dir / "config.yaml"
            if config_path.exists():
                with open(config_path, "r") as f:
                    self._business_config = yaml.safe_load(f) or {}
            else:
                self._business_config = {}
        return self._business_config

    @property
    def env(self) -> EnvironmentSettings:
        """Load and return environment settings."""
        if self._env_settings is None:
            self._env_settings = EnvironmentSettings()
        return self._env_settings

    def get_operating_costs(self) -> OperatingCosts:
        """Get operating cost constants, falling back to defaults for missing keys."""
        if self._operating_costs is None:
            costs = self.business_config.get("costs") or {}
            self._operating_costs = OperatingCosts(**costs)
        return self._operating_costs


# Global config instance
_config_manager: Optional[ConfigManager] = None


def get_config() -> ConfigManager:
    """
    Get the global configuration manager instance.

    Returns:
        ConfigManager singleton instance
    """
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def reset_config() -> None:
    """Drop the cached global instance so the next get_config() reloads."""
    global _config_manager
    _config_manager = None
