#!/usr/bin/env python3
"""
Notification Watcher

Polls one provider's email source on a fixed interval, parses every new
email into a transaction record and hands each poll's batch of valid records
to the subscribers.

State machine per watcher:

    IDLE -> POLLING -> DELIVERING -> IDLE
                    -> FAULTED    -> IDLE

The horizon (``last_seen``) starts unset; the first poll uses the baseline
captured at construction (start time minus the provider's lookback). Every
successful fetch moves the horizon to the time the poll started, before any
parsing happens, whether or not emails were returned. A failed fetch leaves
it untouched so the same window is retried on the next tick.

Watchers share nothing with each other. Within one watcher a tick is skipped
while the previous poll is still running, so polls never overlap.
"""

import asyncio
import logging
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta
from enum import Enum

from .core.dates import Clock, system_clock
from .core.models import TransactionRecord
from .mail.base import EmailSource
from .mail.models import Email
from .providers.base import ProviderParser

logger = logging.getLogger(__name__)

Subscriber = Callable[[list[TransactionRecord]], None]
PollCallback = Callable[[datetime], None]


class WatcherState(Enum):
    """Where a watcher is in its poll cycle."""

    IDLE = "idle"
    POLLING = "polling"
    DELIVERING = "delivering"
    FAULTED = "faulted"


class Watcher:
    """Polling and dispatch loop bound to one provider."""

    def __init__(
        self,
        provider: ProviderParser,
        source: EmailSource,
        interval: float | None = None,
        lookback: timedelta | None = None,
        clock: Clock = system_clock,
        on_poll: PollCallback | None = None,
    ):
        """
        Args:
            provider: Parser for this provider's emails
            source: Where to fetch the emails from
            interval: Seconds between polls (default: provider's)
            lookback: How far before start-up the first poll reaches (default: provider's)
            clock: Source of "now"
            on_poll: Called with the poll time after each successful fetch
        """
        self.provider = provider
        self.source = source
        self.interval = interval if interval is not None else provider.poll_interval
        self.clock = clock
        self.on_poll = on_poll

        self.baseline = clock() - (lookback if lookback is not None else provider.lookback)
        self.last_seen: datetime | None = None
        self.state = WatcherState.IDLE
        self.subscribers: list[Subscriber] = []

        self._timer: asyncio.Task | None = None
        self._inflight: asyncio.Task | None = None

    @property
    def name(self) -> str:
        return self.provider.name

    def subscribe(self, fn: Subscriber) -> None:
        """Register a callback for every poll's batch."""
        self.subscribers.append(fn)

    async def poll(self) -> list[TransactionRecord] | None:
        """
        Run one poll cycle.

        Returns:
            The batch delivered to subscribers, or None if the poll was
            skipped or the fetch failed
        """
        if self.state is not WatcherState.IDLE:
            logger.debug(f"[{self.name}] previous poll still running ({self.state.value}), skipping")
            return None

        self.state = WatcherState.POLLING
        now = self.clock()
        since = self.last_seen if self.last_seen is not None else self.baseline

        try:
            loop = asyncio.get_running_loop()
            emails = await loop.run_in_executor(None, self.source.fetch, since)
        except Exception as e:
            self.state = WatcherState.FAULTED
            logger.warning(f" ❌ {now:%Y/%m/%d %H:%M:%S} [{self.name}] サーバーとの通信に失敗しました。 ({e})")
            self.state = WatcherState.IDLE
            return None

        self.last_seen = now
        if self.on_poll is not None:
            self.on_poll(now)

        self.state = WatcherState.DELIVERING
        try:
            batch = self.extract(emails, now)
            self.notify(batch)
        finally:
            self.state = WatcherState.IDLE

        return batch

    def extract(self, emails: Iterable[Email], now: datetime | None = None) -> list[TransactionRecord]:
        """Parse emails in order, keeping only valid records."""
        stamp = f"{(now or self.clock()):%Y/%m/%d %H:%M:%S}"
        batch = []

        for email in emails:
            body = email.body()
            if body is None:
                continue

            try:
                record = self.provider.parse(body, email.received_at)
            except ValueError as e:
                logger.warning(f" ❌ {stamp} [{self.name}] メール内容を正しく読み取れませんでした。{email.locator} ({e})")
                continue

            if record.is_valid():
                batch.append(record)
            else:
                logger.warning(f" ❌ {stamp} [{self.name}] メール内容を正しく読み取れませんでした。{email.locator}")

        if batch:
            logger.info(f"[{self.name}] {len(batch)} new transactions")
        return batch

    def notify(self, batch: list[TransactionRecord]) -> None:
        """Call every subscriber, in subscription order, with the batch."""
        for subscriber in self.subscribers:
            try:
                subscriber(batch)
            except Exception:
                logger.exception(f"[{self.name}] subscriber {subscriber!r} failed")

    def start(self) -> asyncio.Task:
        """Start the recurring timer. Must be called from a running event loop."""
        if self._timer is None or self._timer.done():
            self._timer = asyncio.create_task(self._run(), name=f"watcher-{self.name}")
            logger.info(f"[{self.name}] watching every {self.interval:g}s since {self.baseline:%Y/%m/%d %H:%M:%S}")
        return self._timer

    def stop(self) -> None:
        """Cancel the timer and any poll in flight."""
        for task in (self._timer, self._inflight):
            if task is not None and not task.done():
                task.cancel()
        self._timer = None

    def tick(self) -> None:
        """Timer callback: spawn a poll unless the previous one is still running."""
        if self._inflight is not None and not self._inflight.done():
            logger.debug(f"[{self.name}] tick skipped, previous poll in flight")
            return
        self._inflight = asyncio.create_task(self.poll(), name=f"poll-{self.name}")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self.tick()


async def run_watchers(watchers: Iterable[Watcher]) -> None:
    """Run the watchers until cancelled."""
    watchers = list(watchers)
    timers = [watcher.start() for watcher in watchers]
    try:
        await asyncio.gather(*timers)
    finally:
        for watcher in watchers:
            watcher.stop()
