#!/usr/bin/env python3
"""
VポイントPay Parser

Handles 「【VポイントPay】ご利用のお知らせ」 and 「【VポイントPay】プリペイド残高加算のお知らせ」.
Neither template carries a usable date, so every recognized line stamps the
record with the email's receipt date. Labels are padded with a full-width
space before the colon ("◇利用金額　:　1,000円").
"""

from datetime import datetime, timedelta
from typing import cast

from ..core.models import PointsTransactionRecord, TransactionRecord
from ..core.money import parse_points, parse_yen
from .base import ProviderParser

USAGE_AMOUNT = "◇利用金額"
USAGE_MERCHANT = "◇利用先"
POINTS_USED = "◇ポイント利用"
CHARGE_AMOUNT = "◇加算額"


class VpointPayParser(ProviderParser):
    name = "vpoint"
    display_name = "VポイントPay"
    tag = "vp"
    subject_keyword = "VポイントPay"

    # Notifications arrive late; look back two days on the first poll.
    poll_interval = 120.0
    lookback = timedelta(days=2)

    label_prefixes = ("◇利用", "◇加算", "◇ポイント")
    delimiter = r"\s*[:：]\s*"

    ledger_source = "VポイントPay"

    record_type = PointsTransactionRecord

    def apply(self, record: TransactionRecord, key: str, value: str, received_at: datetime | None) -> None:
        record = cast(PointsTransactionRecord, record)

        record.date = self.auxiliary_date(received_at)

        if key == USAGE_AMOUNT:
            record.amount = parse_yen(value)
        elif key == USAGE_MERCHANT:
            record.merchant = self.tagged(value)
        elif key == POINTS_USED:
            record.points_used = parse_points(value)
        elif key == CHARGE_AMOUNT:
            record.amount = -parse_yen(value)
            record.merchant = self.display_name
