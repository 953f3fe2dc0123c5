#!/usr/bin/env python3
"""Tests for transaction record and ledger entry models."""

from paywatch.core.models import LedgerEntry, PointsTransactionRecord, TransactionRecord


class TestTransactionRecord:
    def test_defaults_are_zero_values(self):
        record = TransactionRecord()
        assert (record.date, record.merchant, record.amount) == ("", "", 0)

    def test_validity_requires_all_fields(self):
        assert TransactionRecord("2025/05/01", "[JAL Pay]", 1000).is_valid()
        assert not TransactionRecord("", "[JAL Pay]", 1000).is_valid()
        assert not TransactionRecord("2025/05/01", "", 1000).is_valid()
        assert not TransactionRecord("2025/05/01", "[JAL Pay]", 0).is_valid()

    def test_charges_are_valid(self):
        record = TransactionRecord("2025/05/01", "JAL Pay", -500)
        assert record.is_valid()
        assert record.is_charge

    def test_to_dict(self):
        record = TransactionRecord("2025/05/01", "[JAL Pay]", 1000)
        assert record.to_dict() == {"date": "2025/05/01", "merchant": "[JAL Pay]", "amount": 1000}


class TestPointsTransactionRecord:
    def test_remainder(self):
        record = PointsTransactionRecord("2025/05/02", "ローソン", 1280, points_used=200, cash_used=80)
        assert record.remainder == 1000

    def test_validity_ignores_secondary_channels(self):
        assert not PointsTransactionRecord(points_used=100).is_valid()

    def test_to_dict_includes_secondary_channels(self):
        record = PointsTransactionRecord("2025/05/02", "ローソン", 1280, points_used=200)
        assert record.to_dict()["points_used"] == 200
        assert record.to_dict()["cash_used"] == 0


class TestLedgerEntry:
    def test_default_categories(self):
        entry = LedgerEntry(date="2025/05/01", amount=1000, source="JAL Pay", content="[JAL Pay]")
        assert entry.to_dict() == {
            "large_category": "0",
            "middle_category": "0",
            "date": "2025/05/01",
            "amount": 1000,
            "source": "JAL Pay",
            "content": "[JAL Pay]",
        }
