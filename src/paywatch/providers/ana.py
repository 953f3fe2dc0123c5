#!/usr/bin/env python3
"""
ANA Pay Parser

Handles 「ANA Pay ご利用のお知らせ」 and 「ANA Pay チャージ完了のお知らせ」.
"""

from datetime import datetime

from ..core.dates import normalize_date
from ..core.models import TransactionRecord
from ..core.money import parse_yen
from .base import ProviderParser

USAGE_DATE = "ご利用日時"
USAGE_MERCHANT = "ご利用店舗"
USAGE_AMOUNT = "ご利用金額"
CHARGE_DATE = "チャージ日時"
CHARGE_AMOUNT = "チャージ金額"


class ANAPayParser(ProviderParser):
    name = "ana"
    display_name = "ANA Pay"
    tag = "ap"
    subject_keyword = "ANA Pay"

    label_prefixes = ("ご利用", "チャージ")
    delimiter = r"\s*[：:]\s*"

    ledger_source = "ANA Pay"

    def apply(self, record: TransactionRecord, key: str, value: str, received_at: datetime | None) -> None:
        if key in (USAGE_DATE, CHARGE_DATE):
            record.date = normalize_date(value)
        elif key == USAGE_MERCHANT:
            record.merchant = self.tagged(value)
        elif key == USAGE_AMOUNT:
            record.amount = parse_yen(value)
        elif key == CHARGE_AMOUNT:
            record.amount = -parse_yen(value)
            record.merchant = self.display_name

    def finish(self, record: TransactionRecord, received_at: datetime | None) -> None:
        if record.is_charge and not record.date:
            record.date = self.auxiliary_date(received_at)
