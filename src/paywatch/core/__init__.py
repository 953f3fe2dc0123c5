"""
Core Utilities Package

Shared data models and utilities used by the parsers, watchers and exporters.

This package provides:
- Transaction record and ledger entry models
- Yen amount parsing with integer arithmetic
- Date normalization and the injectable clock
- Configuration management for environment-specific settings
"""

from .config import (
    Config,
    ConfigurationError,
    EmailConfig,
    Environment,
    LedgerConfig,
    MailSourceKind,
    TestmailConfig,
    load_config,
)
from .dates import Clock, fixed_clock, get_timezone, normalize_date, system_clock, to_ledger_date
from .models import LedgerEntry, PointsTransactionRecord, TransactionRecord
from .money import format_yen, parse_points, parse_yen

__all__ = [
    "Clock",
    # Configuration
    "Config",
    "ConfigurationError",
    "EmailConfig",
    "Environment",
    # Data models
    "LedgerConfig",
    "LedgerEntry",
    "MailSourceKind",
    "PointsTransactionRecord",
    "TestmailConfig",
    "TransactionRecord",
    # Dates
    "fixed_clock",
    # Amounts
    "format_yen",
    "get_timezone",
    "load_config",
    "normalize_date",
    "parse_points",
    "parse_yen",
    "system_clock",
    "to_ledger_date",
]
