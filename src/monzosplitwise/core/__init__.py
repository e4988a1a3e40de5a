"""
Core Utilities Package

Shared business logic, data models, and utilities.

This package provides:
- Currency handling with integer minor-unit arithmetic
- The Money value type
- Run outcome models shared by the reconciler, CLI and reports
- Configuration management for environment-specific settings
"""

from .config import (
    Config,
    Environment,
    MonzoConfig,
    ReconcileConfig,
    SplitwiseConfig,
    get_config,
    reload_config,
)
from .currency import (
    currency_exponent,
    format_minor_units,
    minor_units_to_decimal_str,
    parse_decimal_str_to_minor_units,
    split_evenly,
    validate_sum_equals_total,
)
from .models import OutcomeStatus, ReconciliationSummary, TransactionOutcome
from .money import Money

__all__ = [
    # Configuration
    "Config",
    "Environment",
    "MonzoConfig",
    "ReconcileConfig",
    "SplitwiseConfig",
    "get_config",
    "reload_config",
    # Currency utilities
    "currency_exponent",
    "format_minor_units",
    "minor_units_to_decimal_str",
    "parse_decimal_str_to_minor_units",
    "split_evenly",
    "validate_sum_equals_total",
    # Models
    "Money",
    "OutcomeStatus",
    "ReconciliationSummary",
    "TransactionOutcome",
]
