"""
Configuration management for Azure cost reporting.

Uses dynaconf for flexible configuration with YAML files and environment overrides.
"""

import logging
from pathlib import Path
from typing import Any

from dynaconf import Dynaconf, Validator

from ..providers.base import ConfigurationError

logger = logging.getLogger(__name__)

# Packaged defaults live next to this module
CONFIG_DIR = Path(__file__).parent
USER_CONFIG_DIR = Path.home() / ".config" / "azure-cost-report"

SECRET_KEYS = {"client_secret"}


def _build_settings() -> Dynaconf:
    return Dynaconf(
        envvar_prefix="AZCOST",
        settings_files=[
            str(CONFIG_DIR / "config.yaml"),  # Base configuration
            str(USER_CONFIG_DIR / "config.yaml"),  # Per-user overrides
            "config.local.yaml",  # Local overrides (git-ignored)
        ],
        environments=False,
        load_dotenv=True,
        merge_enabled=True,
        envvar_separator="__",  # Support nested config via AZCOST_AZURE__TOP=100
        validators=[
            Validator("azure.api_base_url", must_exist=True),
            Validator("azure.api_version", must_exist=True),
            Validator("azure.top", gte=1, lte=5000),
            Validator("azure.timeout", gt=0),
        ],
    )


settings = _build_settings()


class CostReportConfig:
    """Configuration wrapper for report and Azure API settings."""

    def __init__(self, settings_obj: Dynaconf | None = None):
        self.settings = settings_obj if settings_obj is not None else settings
        self._validate_config()

    def _validate_config(self):
        """Validate the configuration on initialization."""
        try:
            self.settings.validators.validate()
        except Exception as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    @property
    def azure(self) -> dict[str, Any]:
        """Azure API and credential settings."""
        return self.settings.get("azure", {})

    @property
    def report(self) -> dict[str, Any]:
        """Report defaults."""
        return self.settings.get("report", {})

    @property
    def subscription_id(self) -> str | None:
        """Default subscription, if configured."""
        return self.azure.get("subscription_id") or None

    @property
    def default_timeframe(self) -> str:
        return self.report.get("timeframe", "BillingMonthToDate")

    @property
    def default_output(self) -> str:
        return self.report.get("output", "console")

    def load_file(self, path: str | Path):
        """Merge an explicit configuration file over the current settings."""
        path = Path(path)
        if not path.is_file():
            raise ConfigurationError(f"Configuration file not found: {path}")

        logger.debug(f"Loading configuration from {path}")
        self.settings.load_file(path=str(path))
        self._validate_config()

    def masked(self) -> dict[str, Any]:
        """Effective settings with secrets masked, for display."""
        azure = {
            key: ("****" if key in SECRET_KEYS and value else value)
            for key, value in self.azure.items()
        }
        return {"azure": azure, "report": dict(self.report)}


# Global configuration instance, created on first use
config: CostReportConfig | None = None


def get_config() -> CostReportConfig:
    """Get the global configuration instance."""
    global config
    if config is None:
        config = CostReportConfig()
    return config
