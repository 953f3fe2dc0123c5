#!/usr/bin/env python3
"""
Integration tests for the watch pipeline.

Wires watchers from configuration, swaps in in-memory email sources and
follows a poll through parsing, ledger derivation and JSON export.
"""

import asyncio
import json
from datetime import datetime, timedelta

import pytest

from paywatch.app import build_email_source, build_watchers
from paywatch.core.config import Config
from paywatch.export.exporters import JsonLedgerExporter
from paywatch.mail.imap import ImapEmailSource
from paywatch.mail.testmail import TestmailClient
from paywatch.providers import get_provider
from tests.fixtures.emails import RAKUTEN_CHARGE_TEXT, RAKUTEN_USAGE_HTML, UNRELATED_TEXT


class StaticSource:
    def __init__(self, emails):
        self.emails = emails
        self.calls = []

    def fetch(self, since):
        self.calls.append(since)
        return self.emails


@pytest.mark.integration
class TestBuildWatchers:
    def test_one_watcher_per_configured_provider(self, clock):
        watchers = build_watchers(Config.from_environment(), clock=clock)

        assert [w.name for w in watchers] == ["rakuten", "ana", "vpoint", "jal"]
        assert [w.source.tag for w in watchers] == ["rp", "ap", "vp", "jp"]
        assert all(isinstance(w.source, TestmailClient) for w in watchers)
        assert all(len(w.subscribers) == 1 for w in watchers)

    def test_imap_sources(self, monkeypatch):
        monkeypatch.setenv("MAIL_SOURCE", "imap")
        monkeypatch.setenv("EMAIL_USERNAME", "user@example.com")
        monkeypatch.setenv("EMAIL_PASSWORD", "app_password")
        config = Config.from_environment()

        source = build_email_source(config, get_provider("vpoint"))

        assert isinstance(source, ImapEmailSource)
        assert source.subject_keyword == "VポイントPay"

    def test_overrides(self, clock, now):
        watchers = build_watchers(
            Config.from_environment(), provider_names=["vpoint"], interval=10, lookback=timedelta(hours=3), clock=clock
        )

        (watcher,) = watchers
        assert watcher.interval == 10
        assert watcher.baseline == now - timedelta(hours=3)

    def test_parsers_use_configured_timezone(self, monkeypatch, clock):
        monkeypatch.setenv("PAYWATCH_TIMEZONE", "UTC")

        (watcher,) = build_watchers(Config.from_environment(), provider_names=["jal"], clock=clock)

        assert watcher.provider.tz.key == "UTC"


@pytest.mark.integration
def test_poll_exports_ledger_file(temp_dir, clock, make_email, jst):
    exporter = JsonLedgerExporter(temp_dir, clock=clock)
    (watcher,) = build_watchers(Config.from_environment(), provider_names=["rakuten"], clock=clock, exporter=exporter)
    watcher.source = StaticSource(
        [
            make_email(html=RAKUTEN_USAGE_HTML, url="https://mail/usage"),
            make_email(text=UNRELATED_TEXT, url="https://mail/newsletter"),
            make_email(text=RAKUTEN_CHARGE_TEXT, url="https://mail/charge", received_at=datetime(2025, 6, 9, 8, 0, tzinfo=jst)),
        ]
    )
    (subscriber,) = watcher.subscribers

    async def scenario():
        batch = await watcher.poll()
        await subscriber.drain()
        return batch

    batch = asyncio.run(scenario())

    assert [record.amount for record in batch] == [1280, -5000]

    (output_file,) = temp_dir.glob("*_ledger.json")
    with open(output_file, encoding="utf-8") as f:
        data = json.load(f)

    assert [(e["date"], e["amount"], e["content"]) for e in data["entries"]] == [
        ("2025/05/02", 200, "ローソン 大手町店 [楽天ペイ] 楽天ポイント利用"),
        ("2025/05/02", 1080, "ローソン 大手町店 [楽天ペイ] 楽天キャッシュ利用"),
        ("2025/06/09", -5000, "楽天キャッシュ 楽天キャッシュ利用"),
    ]
    assert {e["source"] for e in data["entries"]} == {"楽天ペイ"}
