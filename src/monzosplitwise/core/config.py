#!/usr/bin/env python3
"""
Configuration Management for Monzo to Splitwise Reconciliation

Handles environment-based configuration with secure defaults and validation.
Supports multiple environments (development, test, production). Access
tokens are read from the environment (or a .env file); obtaining and
refreshing them is outside the scope of this tool.
"""

import logging
import os
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Environment(Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TEST = "test"
    PRODUCTION = "production"


@dataclass
class MonzoConfig:
    """Monzo API configuration."""

    access_token: str | None = None
    account_id: str | None = None  # None selects the current account
    base_url: str = "https://api.monzo.com"
    timeout: int = 30


@dataclass
class SplitwiseConfig:
    """Splitwise API configuration."""

    access_token: str | None = None
    base_url: str = "https://secure.splitwise.com/api/v3.0"
    timeout: int = 30


@dataclass
class ReconcileConfig:
    """Reconciliation window and posting settings."""

    lookback_days: int = 15
    transaction_limit: int = 100  # Monzo page size; pagination is not followed
    expense_limit: int = 0  # 0 fetches every Splitwise expense in the window
    creation_method: str = "quickadd"


@dataclass
class Config:
    """
    Main configuration class for the reconciler.

    Loads configuration from environment variables with secure defaults
    and validation for each environment type.
    """

    environment: Environment

    # Directory for run reports
    data_dir: Path

    # Component configurations
    monzo: MonzoConfig
    splitwise: SplitwiseConfig
    reconcile: ReconcileConfig

    # Application settings
    debug: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_environment(cls) -> "Config":
        """Create configuration from environment variables."""
        env = Environment(os.getenv("MONZOSPLITWISE_ENV", "development"))

        if env == Environment.TEST:
            default_test_dir = Path(tempfile.gettempdir()) / "test_monzosplitwise"
            data_dir = Path(os.getenv("MONZOSPLITWISE_DATA_DIR", str(default_test_dir)))
        else:
            data_dir = Path(os.getenv("MONZOSPLITWISE_DATA_DIR", "./data")).expanduser().resolve()

        monzo = MonzoConfig(
            access_token=os.getenv("MONZO_ACCESS_TOKEN"),
            account_id=os.getenv("MONZO_ACCOUNT_ID") or None,
            base_url=os.getenv("MONZO_BASE_URL", "https://api.monzo.com"),
            timeout=int(os.getenv("MONZO_TIMEOUT", "30")),
        )

        splitwise = SplitwiseConfig(
            access_token=os.getenv("SPLITWISE_ACCESS_TOKEN"),
            base_url=os.getenv("SPLITWISE_BASE_URL", "https://secure.splitwise.com/api/v3.0"),
            timeout=int(os.getenv("SPLITWISE_TIMEOUT", "30")),
        )

        reconcile = ReconcileConfig(
            lookback_days=int(os.getenv("LOOKBACK_DAYS", "15")),
            transaction_limit=int(os.getenv("TRANSACTION_LIMIT", "100")),
            expense_limit=int(os.getenv("EXPENSE_LIMIT", "0")),
            creation_method=os.getenv("CREATION_METHOD", "quickadd"),
        )

        return cls(
            environment=env,
            data_dir=data_dir,
            monzo=monzo,
            splitwise=splitwise,
            reconcile=reconcile,
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    def validate(self) -> list:
        """Validate configuration and return list of errors."""
        errors = []

        # Tokens are only mandatory in production; other environments
        # report missing tokens when a run is attempted
        if self.environment == Environment.PRODUCTION:
            if not self.monzo.access_token:
                errors.append("MONZO_ACCESS_TOKEN is required in production")
            if not self.splitwise.access_token:
                errors.append("SPLITWISE_ACCESS_TOKEN is required in production")

        if self.monzo.timeout <= 0:
            errors.append("Monzo timeout must be positive")
        if self.splitwise.timeout <= 0:
            errors.append("Splitwise timeout must be positive")
        if self.reconcile.lookback_days <= 0:
            errors.append("Lookback days must be positive")
        if self.reconcile.transaction_limit <= 0:
            errors.append("Transaction limit must be positive")
        if self.reconcile.expense_limit < 0:
            errors.append("Expense limit must be non-negative")

        return errors

    def missing_credentials(self) -> list[str]:
        """Names of the token variables that are not set."""
        missing = []
        if not self.monzo.access_token:
            missing.append("MONZO_ACCESS_TOKEN")
        if not self.splitwise.access_token:
            missing.append("SPLITWISE_ACCESS_TOKEN")
        return missing

    def setup_logging(self) -> None:
        """Configure logging based on configuration."""
        level = logging.DEBUG if self.debug else getattr(logging, self.log_level, logging.INFO)

        # Configure format based on environment
        if self.environment == Environment.DEVELOPMENT:
            format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        else:
            format_str = "%(asctime)s - %(levelname)s - %(message)s"

        logging.basicConfig(level=level, format=format_str, datefmt="%Y-%m-%d %H:%M:%S")

        # Reduce noise from external libraries in production
        if self.environment == Environment.PRODUCTION:
            logging.getLogger("urllib3").setLevel(logging.WARNING)
            logging.getLogger("requests").setLevel(logging.WARNING)

    def get_sensitive_fields(self) -> list:
        """Get list of field names that contain sensitive data."""
        return [
            "monzo.access_token",
            "splitwise.access_token",
        ]

    def to_dict(self, include_sensitive: bool = False) -> dict[str, Any]:
        """Convert configuration to dictionary, optionally excluding sensitive data."""
        result: dict[str, Any] = {}

        for field_name, field_value in self.__dict__.items():
            if hasattr(field_value, "__dict__") and not isinstance(field_value, (Path, Enum)):
                # Nested dataclass
                nested_dict: dict[str, Any] = {}
                for nested_name, nested_value in field_value.__dict__.items():
                    full_field_name = f"{field_name}.{nested_name}"

                    if (
                        not include_sensitive
                        and full_field_name in self.get_sensitive_fields()
                        and nested_value is not None
                    ):
                        nested_dict[nested_name] = "***REDACTED***"
                    else:
                        nested_dict[nested_name] = nested_value

                result[field_name] = nested_dict
            elif isinstance(field_value, Path):
                result[field_name] = str(field_value)
            elif isinstance(field_value, Enum):
                result[field_name] = field_value.value
            else:
                result[field_name] = field_value

        return result


# Global configuration instance
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config.from_environment()

        # Validate configuration
        errors = _config.validate()
        if errors:
            _config = None
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

        # Setup logging
        _config.setup_logging()

    return _config


def reload_config() -> Config:
    """Reload configuration from environment (useful for testing)."""
    global _config
    _config = None
    return get_config()
