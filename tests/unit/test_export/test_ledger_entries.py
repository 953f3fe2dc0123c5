#!/usr/bin/env python3
"""Tests for deriving ledger entries from transaction records."""

import pytest

from paywatch.core.models import PointsTransactionRecord, TransactionRecord
from paywatch.export.ledger import build_batch_entries, build_ledger_entries
from paywatch.providers.jal import JALPayParser
from paywatch.providers.rakuten import RakutenPayParser
from paywatch.providers.vpoint import VpointPayParser


@pytest.mark.export
class TestPlainRecords:
    def test_single_entry(self):
        record = TransactionRecord(date="2025/05/01", merchant="[JAL Pay]", amount=1000)

        entries = build_ledger_entries(record, JALPayParser())

        assert len(entries) == 1
        assert entries[0].to_dict() == {
            "large_category": "0",
            "middle_category": "0",
            "date": "2025/05/01",
            "amount": 1000,
            "source": "JAL Pay",
            "content": "[JAL Pay]",
        }


@pytest.mark.export
class TestPointsRecords:
    def test_points_and_cash_cover_everything(self):
        record = PointsTransactionRecord(
            date="2025/05/02",
            merchant="ローソン 大手町店 [楽天ペイ]",
            amount=1280,
            points_used=200,
            cash_used=1080,
        )

        entries = build_ledger_entries(record, RakutenPayParser())

        assert [(e.amount, e.content) for e in entries] == [
            (200, "ローソン 大手町店 [楽天ペイ] 楽天ポイント利用"),
            (1080, "ローソン 大手町店 [楽天ペイ] 楽天キャッシュ利用"),
        ]
        assert {e.source for e in entries} == {"楽天ペイ"}

    def test_card_only_payment_is_not_exported(self):
        record = PointsTransactionRecord(date="2025/05/05", merchant="楽天ブックス [楽天ペイ]", amount=3300)

        assert build_ledger_entries(record, RakutenPayParser()) == []

    def test_card_part_is_left_out(self):
        record = PointsTransactionRecord("2025/05/08", "ドラッグストア [楽天ペイ]", 1000, points_used=300, cash_used=200)

        entries = build_ledger_entries(record, RakutenPayParser())

        assert [e.amount for e in entries] == [300, 200]

    def test_vpoint_payment_is_a_single_total_entry(self):
        record = PointsTransactionRecord(
            date="2025/05/06", merchant="スターバックス 渋谷店 [VポイントPay]", amount=650, points_used=150
        )

        entries = build_ledger_entries(record, VpointPayParser())

        assert [(e.amount, e.source, e.content) for e in entries] == [
            (650, "VポイントPay", "スターバックス 渋谷店 [VポイントPay]")
        ]

    def test_cash_charge(self):
        record = PointsTransactionRecord(date="2025/05/07", merchant="楽天キャッシュ", amount=-5000, cash_used=-5000)

        entries = build_ledger_entries(record, RakutenPayParser())

        assert [(e.amount, e.content) for e in entries] == [(-5000, "楽天キャッシュ 楽天キャッシュ利用")]

    @pytest.mark.parametrize(
        ("amount", "points", "cash"),
        [(1280, 200, 1080), (3300, 0, 0), (650, 150, 0), (-5000, 0, -5000), (1000, 300, 200)],
    )
    def test_entries_sum_to_points_and_cash(self, amount, points, cash):
        record = PointsTransactionRecord("2025/05/02", "店", amount, points_used=points, cash_used=cash)

        entries = build_ledger_entries(record, RakutenPayParser())

        assert sum(e.amount for e in entries) == points + cash
        assert all(e.date == "2025/05/02" for e in entries)


@pytest.mark.export
def test_batch_preserves_order():
    records = [
        TransactionRecord("2025/05/01", "[JAL Pay]", 1000),
        TransactionRecord("2025/05/02", "JAL Pay", -500),
    ]

    entries = build_batch_entries(records, JALPayParser())

    assert [e.amount for e in entries] == [1000, -500]
