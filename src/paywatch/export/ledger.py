#!/usr/bin/env python3
"""
Ledger Entry Derivation

Maps transaction records to the lines the ledger should receive. Most
providers become a single line for the whole payment. Providers that split a
payment between points, stored cash and a linked card export only the points
and cash parts, one line per channel; the card part already reaches the
ledger through the card statement.
"""

from collections.abc import Iterable

from ..core.models import LedgerEntry, PointsTransactionRecord, TransactionRecord
from ..providers.base import ProviderParser


def build_ledger_entries(record: TransactionRecord, provider: ProviderParser) -> list[LedgerEntry]:
    """
    Derive ledger entries for one record.

    Args:
        record: A valid transaction record
        provider: Parser that produced it (supplies ledger labels)

    Returns:
        Ledger entries for the record; empty for a split payment paid
        entirely by card
    """
    source = provider.ledger_source or provider.display_name

    if not (provider.split_channels and isinstance(record, PointsTransactionRecord)):
        return [LedgerEntry(date=record.date, amount=record.amount, source=source, content=record.merchant)]

    entries = []

    if record.points_used > 0:
        entries.append(
            LedgerEntry(
                date=record.date,
                amount=record.points_used,
                source=source,
                content=f"{record.merchant} {provider.points_label}".strip(),
            )
        )

    if record.cash_used != 0:
        entries.append(
            LedgerEntry(
                date=record.date,
                amount=record.cash_used,
                source=source,
                content=f"{record.merchant} {provider.cash_label}".strip(),
            )
        )

    return entries


def build_batch_entries(records: Iterable[TransactionRecord], provider: ProviderParser) -> list[LedgerEntry]:
    """Derive ledger entries for a whole batch, preserving record order."""
    entries: list[LedgerEntry] = []
    for record in records:
        entries.extend(build_ledger_entries(record, provider))
    return entries
