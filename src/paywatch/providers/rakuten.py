#!/usr/bin/env python3
"""
Rakuten Pay Parser

Handles the 楽天ペイ app usage confirmation (「楽天ペイ アプリご利用内容確認メール」)
and Rakuten Cash charge notifications. The usage email is an HTML table in
which each row holds a label cell and a value cell; after rendering, the
cells are tab-separated. A payment can be split between Rakuten points,
Rakuten Cash and the linked card, so records carry the points and cash parts
separately.
"""


import re
from datetime import datetime
from typing import cast

from ..core.dates import normalize_date
from ..core.models import PointsTransactionRecord, TransactionRecord
from ..core.money import parse_points, parse_yen
from .base import ProviderParser

USAGE_DATE = "ご利用日時"
USAGE_MERCHANT = "ご利用店舗"
TOTAL_AMOUNT = "決済総額"
POINTS_KEYS = ("ポイント", "ポイント利用")
CASH_KEYS = ("楽天キャッシュ", "楽天キャッシュ利用")
CHARGE_DATE = "チャージ日時"
CHARGE_AMOUNT = "チャージ金額"

CASH_LABEL = "楽天キャッシュ"

# Headings such as "楽天キャッシュ　チャージ完了のお知らせ" split on the full-width
# space like a label row does; only values that start like an amount count.
_AMOUNT_LIKE = re.compile(r"[-－]?[¥￥]?\s*[0-9０-９]")


class RakutenPayParser(ProviderParser):
    name = "rakuten"
    display_name = "楽天ペイ"
    tag = "rp"
    subject_keyword = "楽天ペイ"

    label_prefixes = ("ご利用", "決済総額", "ポイント", "楽天キャッシュ", "チャージ")
    delimiter = r"\s*[\t：:]\s*|　+"

    ledger_source = "楽天ペイ"
    points_label = "楽天ポイント利用"
    cash_label = "楽天キャッシュ利用"
    split_channels = True

    record_type = PointsTransactionRecord

    def apply(self, record: TransactionRecord, key: str, value: str, received_at: datetime | None) -> None:
        record = cast(PointsTransactionRecord, record)

        if key in (USAGE_DATE, CHARGE_DATE):
            record.date = normalize_date(value)
        elif key == USAGE_MERCHANT:
            record.merchant = self.tagged(value)
        elif key == TOTAL_AMOUNT:
            record.amount = parse_yen(value)
        elif key in POINTS_KEYS:
            if _AMOUNT_LIKE.match(value):
                record.points_used = parse_points(value)
        elif key in CASH_KEYS:
            if _AMOUNT_LIKE.match(value):
                record.cash_used = parse_yen(value)
        elif key == CHARGE_AMOUNT:
            charged = parse_yen(value)
            record.amount = -charged
            record.cash_used = -charged
            record.merchant = CASH_LABEL

    def finish(self, record: TransactionRecord, received_at: datetime | None) -> None:
        record = cast(PointsTransactionRecord, record)

        # Some templates omit the total when points and cash cover everything
        if record.amount == 0 and (record.points_used or record.cash_used):
            record.amount = record.points_used + record.cash_used

        if record.is_charge and not record.date:
            record.date = self.auxiliary_date(received_at)
