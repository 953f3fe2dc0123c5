#!/usr/bin/env python3
"""
JAL Pay Parser

Handles 「［JAL Pay］ご利用のお知らせ」 and 「［JAL Pay］チャージ完了のお知らせ」.
Usage notifications do not name the merchant, so the provider tag stands in.
Charge notifications carry no date, so the receipt date is used.
"""

from datetime import datetime

from ..core.dates import normalize_date
from ..core.models import TransactionRecord
from ..core.money import parse_yen
from .base import ProviderParser

USAGE_DATE = "ご利用日時"
USAGE_AMOUNT = "ご利用金額"
CHARGE_AMOUNT = "チャージ金額"


class JALPayParser(ProviderParser):
    name = "jal"
    display_name = "JAL Pay"
    tag = "jp"
    subject_keyword = "JAL Pay"

    label_prefixes = ("ご利用", "チャージ金額")
    delimiter = "："

    ledger_source = "JAL Pay"

    def apply(self, record: TransactionRecord, key: str, value: str, received_at: datetime | None) -> None:
        if key == USAGE_DATE:
            record.date = normalize_date(value)
        elif key == USAGE_AMOUNT:
            record.amount = parse_yen(value)
            record.merchant = self.tagged()
        elif key == CHARGE_AMOUNT:
            record.date = self.auxiliary_date(received_at)
            record.amount = -parse_yen(value)
            record.merchant = self.display_name
