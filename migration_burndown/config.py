"""
Configuration Management

Provides centralized, validated runtime settings for the burndown report.
Values come from environment variables (a local .env file is loaded first)
and are validated fail-fast.

Usage:
    from migration_burndown.config import get_config

    settings = get_config().get_burndown_settings()
    print(settings.trend_window_days)

Environment variables (all optional):
    BURNDOWN_TREND_WINDOW_DAYS  Trailing regression window in days (default: 14)
    BURNDOWN_ENVIRONMENT_ORDER  Comma-separated canonical order (default: dev,sit,uat,nft)
    BURNDOWN_LOG_LEVEL          DEBUG, INFO, WARNING, ERROR or CRITICAL (default: INFO)
    BURNDOWN_LOG_JSON           1/true/yes/on for JSON console logs (default: off)

Raises:
    ConfigurationError: If configuration is invalid
"""

import os
import re
from dataclasses import dataclass

from dotenv import load_dotenv

from migration_burndown.domain.constants import burndown_constants, environment_config

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_TRUE_VALUES = {"1", "true", "yes", "y", "on"}
_FALSE_VALUES = {"0", "false", "no", "n", "off", ""}


class ConfigurationError(Exception):
    """Raised when configuration is missing or invalid."""

    pass


@dataclass
class BurndownSettings:
    """
    Validated burndown report settings.
    """

    trend_window_days: int = burndown_constants.TREND_WINDOW_DAYS
    environment_order: tuple[str, ...] = environment_config.ORDER
    log_level: str = "INFO"
    log_json: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self):
        """
        Validate settings.

        Raises:
            ConfigurationError: If a setting is invalid
        """
        if self.trend_window_days < 1 or self.trend_window_days > 365:
            raise ConfigurationError(
                f"BURNDOWN_TREND_WINDOW_DAYS must be between 1 and 365: {self.trend_window_days}"
            )

        if not self.environment_order:
            raise ConfigurationError("BURNDOWN_ENVIRONMENT_ORDER must name at least one environment")

        for env in self.environment_order:
            if not re.match(r"^[a-zA-Z0-9_\-]+$", env):
                raise ConfigurationError(f"BURNDOWN_ENVIRONMENT_ORDER contains an invalid name: {env!r}")

        if len(set(self.environment_order)) != len(self.environment_order):
            raise ConfigurationError("BURNDOWN_ENVIRONMENT_ORDER contains duplicate environments")

        self.log_level = self.log_level.upper()
        if self.log_level not in _VALID_LOG_LEVELS:
            raise ConfigurationError(f"BURNDOWN_LOG_LEVEL must be one of {', '.join(_VALID_LOG_LEVELS)}: {self.log_level}")


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value.strip())
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer: {value!r}") from e


def _parse_bool(name: str, value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean (true/false): {value!r}")


class BurndownConfig:
    """
    Centralized configuration manager.

    Loads and validates configuration from environment variables.
    """

    def __init__(self):
        """Initialize configuration (loads .env file)."""
        load_dotenv()

    def get_burndown_settings(self) -> BurndownSettings:
        """
        Get validated burndown settings.

        Returns:
            BurndownSettings: Validated settings

        Raises:
            ConfigurationError: If configuration is invalid
        """
        window = os.getenv("BURNDOWN_TREND_WINDOW_DAYS")
        order = os.getenv("BURNDOWN_ENVIRONMENT_ORDER")
        log_level = os.getenv("BURNDOWN_LOG_LEVEL")
        log_json = os.getenv("BURNDOWN_LOG_JSON")

        return BurndownSettings(
            trend_window_days=(
                _parse_int("BURNDOWN_TREND_WINDOW_DAYS", window)
                if window
                else burndown_constants.TREND_WINDOW_DAYS
            ),
            environment_order=(
                tuple(env.strip() for env in order.split(",") if env.strip()) if order else environment_config.ORDER
            ),
            log_level=log_level or "INFO",
            log_json=_parse_bool("BURNDOWN_LOG_JSON", log_json) if log_json is not None else False,
        )


_config_instance = None


def get_config() -> BurndownConfig:
    """
    Get the global configuration instance (singleton pattern).

    Returns:
        BurndownConfig: The configuration manager
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = BurndownConfig()
    return _config_instance
