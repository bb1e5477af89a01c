import json
import os
from dataclasses import dataclass, field
from datetime import timezone, tzinfo
from pathlib import Path
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from finance_dashboard.logging_setup import get_logger

logger = get_logger(__name__)

# Package defaults (bundled with code)
PACKAGE_CONFIG_DIR = Path(__file__).parent / "defaults"

# User configs (gitignored), overridable through the environment
USER_CONFIG_DIR = Path(os.getenv("FINANCE_DASHBOARD_CONFIG_DIR", "config"))

class ConfigLoader:
    """Load configuration with user overrides"""

    @staticmethod
    def load_config(config_name: str, user_dir: Optional[Path] = None) -> Dict[str, Any]:
        """
        Load config with fallback: user config -> default config

        Args:
            config_name: Name of the config file (e.g., 'parsers.json')
            user_dir: Directory searched before the packaged defaults

        Raises:
            FileNotFoundError: If no config file was found

        Returns:
            Parsed JSON configuration
        """
        user_config_path = (user_dir or USER_CONFIG_DIR) / config_name
        if user_config_path.exists():
            logger.debug("Loading %s from %s", config_name, user_config_path)
            with open(user_config_path) as f:
                return json.load(f)

        default_config_path = PACKAGE_CONFIG_DIR / config_name
        if default_config_path.exists():
            with open(default_config_path) as f:
                return json.load(f)

        raise FileNotFoundError(
            f"Config file '{config_name}' not found in:\n"
            f" - {user_config_path}\n"
            f" - {default_config_path}"
        )

    @staticmethod
    def load_parsers_config():
        """Load parsers registry configuration"""
        return ConfigLoader.load_config('parsers.json')

    @staticmethod
    def load_dashboard_config():
        """Load dashboard settings"""
        return ConfigLoader.load_config('dashboard.json')


@dataclass(frozen=True)
class DashboardSettings:
    """Application settings for the dashboards and the store"""
    database_path: Path = Path("data/finance.db")
    default_pin: str = "199542"
    currency: str = "Ksh"
    timezone: str = "UTC"
    users: List[str] = field(default_factory=list)
    income_categories: List[str] = field(default_factory=list)

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]] = None) -> "DashboardSettings":
        """
        Build settings from a config dict.

        Args:
            config: Optional config dict. If None, loads from ConfigLoader.
                Missing keys keep their defaults.
        """
        if config is None:
            config = ConfigLoader.load_dashboard_config()

        defaults = cls()
        return cls(
            database_path=Path(config.get("database_path", defaults.database_path)),
            default_pin=str(config.get("default_pin", defaults.default_pin)),
            currency=config.get("currency", defaults.currency),
            timezone=config.get("timezone", defaults.timezone),
            users=list(config.get("users", [])),
            income_categories=list(config.get("income_categories", [])),
        )

    @property
    def tz(self) -> tzinfo:
        """Timezone that month and day boundaries are read in"""
        if self.timezone.upper() == "UTC":
            return timezone.utc
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("Unknown timezone %r, using UTC", self.timezone)
            return timezone.utc

    def format_amount(self, amount) -> str:
        return f"{self.currency} {amount:,.2f}"
