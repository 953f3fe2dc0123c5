#!/usr/bin/env python3
"""
Core Data Models for paywatch

Canonical transaction shape produced by every provider parser, its
points/cash extension, and the ledger entry shape accepted by exporters.
"""

from dataclasses import asdict, dataclass
from typing import Any


@dataclass
class TransactionRecord:
    """
    One transaction extracted from one notification email.

    Amounts are signed integer yen: positive for spend, negative for a
    balance top-up (charge), so downstream ledger logic treats both the same.
    Fields keep their zero values when the email never mentioned them.
    """

    date: str = ""  # YYYY/MM/DD
    merchant: str = ""
    amount: int = 0

    def is_valid(self) -> bool:
        """A record is usable only when date, merchant and amount are all set."""
        return self.date != "" and self.merchant != "" and self.amount != 0

    @property
    def is_charge(self) -> bool:
        return self.amount < 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


@dataclass
class PointsTransactionRecord(TransactionRecord):
    """
    Transaction from a provider that reports a secondary monetary channel.

    ``points_used`` is the part of ``amount`` paid with reward points and
    ``cash_used`` the part paid from the provider's stored balance. Any
    remainder was paid by the linked card.
    """

    points_used: int = 0
    cash_used: int = 0

    @property
    def remainder(self) -> int:
        """Part of the amount not covered by points or stored balance."""
        return self.amount - self.points_used - self.cash_used


@dataclass
class LedgerEntry:
    """
    One line submitted to the ledger.

    Categories are placeholders ("0") until category mapping exists.
    """

    date: str
    amount: int
    source: str
    content: str
    large_category: str = "0"
    middle_category: str = "0"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "large_category": self.large_category,
            "middle_category": self.middle_category,
            "date": self.date,
            "amount": self.amount,
            "source": self.source,
            "content": self.content,
        }
