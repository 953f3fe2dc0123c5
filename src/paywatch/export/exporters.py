#!/usr/bin/env python3
"""
Ledger Exporters

Submit ledger entries to their destination. Exporters are synchronous and
raise LedgerExportError on failure; the subscriber runs them off the event
loop and logs failures, so nothing here needs to be defensive about the
watcher.
"""

import json
import logging
import re
from pathlib import Path
from typing import Protocol

import requests

from ..core.config import LedgerConfig
from ..core.dates import Clock, system_clock
from ..core.models import LedgerEntry

logger = logging.getLogger(__name__)


class LedgerExportError(Exception):
    """The ledger rejected or never received a batch."""


class LedgerExporter(Protocol):
    """Anything that can submit a batch of ledger entries."""

    def submit(self, entries: list[LedgerEntry]) -> None:
        ...


class JsonLedgerExporter:
    """
    Writes each batch to a pretty-printed JSON file.

    Files are named ``{timestamp}_{source}_ledger.json`` under the output
    directory so that a separate import step (or a person) can pick them up.
    """

    def __init__(self, output_dir: Path, clock: Clock = system_clock):
        self.output_dir = Path(output_dir)
        self.clock = clock

    def submit(self, entries: list[LedgerEntry]) -> None:
        if not entries:
            return

        timestamp = self.clock().strftime("%Y-%m-%d_%H-%M-%S-%f")
        source = _safe_filename(entries[0].source)
        output_file = self.output_dir / f"{timestamp}_{source}_ledger.json"

        try:
            output_file.parent.mkdir(parents=True, exist_ok=True)
            with open(output_file, "w", encoding="utf-8") as f:
                json.dump(
                    {"exported_at": self.clock().isoformat(), "entries": [e.to_dict() for e in entries]},
                    f,
                    indent=2,
                    ensure_ascii=False,
                )
        except OSError as e:
            raise LedgerExportError(f"Could not write {output_file}: {e}") from e

        logger.info(f"Wrote {len(entries)} ledger entries to {output_file}")


class HttpLedgerExporter:
    """POSTs each batch as JSON to a ledger endpoint using basic auth."""

    def __init__(
        self,
        url: str,
        username: str,
        password: str,
        timeout: int = 30,
        session: requests.Session | None = None,
    ):
        self.url = url
        self.auth = (username, password)
        self.timeout = timeout
        self.session = session or requests.Session()

    def submit(self, entries: list[LedgerEntry]) -> None:
        if not entries:
            return

        try:
            response = self.session.post(
                self.url,
                json={"entries": [e.to_dict() for e in entries]},
                auth=self.auth,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise LedgerExportError(f"Ledger submission to {self.url} failed: {e}") from e

        logger.info(f"Submitted {len(entries)} ledger entries to {self.url}")


def create_exporter(config: LedgerConfig, clock: Clock = system_clock) -> LedgerExporter:
    """Pick the exporter the configuration asks for."""
    if config.url:
        return HttpLedgerExporter(
            url=config.url,
            username=config.username or "",
            password=config.password or "",
            timeout=config.timeout,
        )
    return JsonLedgerExporter(config.output_dir, clock=clock)


def _safe_filename(value: str) -> str:
    return re.sub(r"[^\w\-]", "_", value) or "ledger"
