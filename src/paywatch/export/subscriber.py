#!/usr/bin/env python3
"""
Ledger Subscriber

Watcher subscriber that turns each batch into ledger entries and submits
them without blocking the poll loop. Submission runs in the default
executor as a detached task; its outcome is only ever logged, so a failed or
slow export never stalls or breaks later polls. Failed batches are not
retried.
"""

import asyncio
import logging

from ..core.dates import Clock, system_clock
from ..core.models import LedgerEntry, TransactionRecord
from ..core.money import format_yen
from ..providers.base import ProviderParser
from .exporters import LedgerExporter
from .ledger import build_batch_entries

logger = logging.getLogger(__name__)


class LedgerSubscriber:
    """Exports every non-empty batch from one provider's watcher."""

    def __init__(self, provider: ProviderParser, exporter: LedgerExporter, clock: Clock = system_clock):
        self.provider = provider
        self.exporter = exporter
        self.clock = clock
        self._pending: set[asyncio.Future] = set()

    def __call__(self, batch: list[TransactionRecord]) -> None:
        if not batch:
            return

        entries = build_batch_entries(batch, self.provider)
        for entry in entries:
            logger.info(f" ⏬ {entry.date} {entry.content} {format_yen(entry.amount)}")

        if entries:
            self.submit_detached(entries)

    def submit_detached(self, entries: list[LedgerEntry]) -> asyncio.Future:
        """Start the export in the background and return its future."""
        loop = asyncio.get_running_loop()
        future = loop.run_in_executor(None, self.exporter.submit, entries)
        self._pending.add(future)
        future.add_done_callback(self._export_done)
        return future

    def _export_done(self, future: asyncio.Future) -> None:
        self._pending.discard(future)
        if future.cancelled():
            return

        error = future.exception()
        if error is not None:
            now = self.clock()
            logger.error(
                f" ❌ {now:%Y/%m/%d %H:%M:%S} [{self.provider.name}] 家計簿への書き出しに失敗しました。 ({error})",
                exc_info=error,
            )

    @property
    def pending(self) -> int:
        """Number of exports still running."""
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for every export in flight to finish."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
