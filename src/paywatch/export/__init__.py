"""
Ledger Export Package

Turns validated transaction batches into ledger entries and submits them.

Key Components:
- ledger: record to ledger-entry derivation (points/cash/card split)
- exporters: JSON-file and HTTP exporters
- subscriber: fire-and-forget watcher subscriber
"""

from .exporters import (
    HttpLedgerExporter,
    JsonLedgerExporter,
    LedgerExporter,
    LedgerExportError,
    create_exporter,
)
from .ledger import build_batch_entries, build_ledger_entries
from .subscriber import LedgerSubscriber

__all__ = [
    "HttpLedgerExporter",
    "JsonLedgerExporter",
    "LedgerExportError",
    "LedgerExporter",
    "LedgerSubscriber",
    "build_batch_entries",
    "build_ledger_entries",
    "create_exporter",
]
