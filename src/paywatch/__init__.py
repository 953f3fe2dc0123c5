"""
paywatch - Payment Notification Watcher

Watches the notification emails sent by Japanese cashless payment services,
extracts each transaction, and exports it to a household ledger.

Key Features:
- Line-oriented parsers for 楽天ペイ, ANA Pay, VポイントPay and JAL Pay
- One polling watcher per provider with at-most-once processing per run
- testmail.app and IMAP email sources
- Fire-and-forget ledger export (JSON files or HTTP)

Domain Packages:
- core: Data models, yen and date handling, configuration
- mail: Email sources and HTML rendering
- providers: Per-provider parsers
- export: Ledger entry derivation and exporters
- cli: Command-line interface

Example Usage:
    from paywatch.providers import get_provider

    parser = get_provider("jal")
    record = parser.parse("ご利用金額：1,000円\\nご利用日時：2025年05月01日 12:00")

Version: 0.3.0
"""

__version__ = "0.3.0"
__author__ = "paywatch contributors"

from .core.config import Config, ConfigurationError, Environment, load_config
from .core.models import LedgerEntry, PointsTransactionRecord, TransactionRecord
from .providers import get_provider
from .watcher import Watcher, WatcherState, run_watchers

__all__ = [
    # Configuration
    "Config",
    "ConfigurationError",
    "Environment",
    # Core models
    "LedgerEntry",
    "PointsTransactionRecord",
    "TransactionRecord",
    # Watching
    "Watcher",
    "WatcherState",
    "get_provider",
    "load_config",
    "run_watchers",
]
