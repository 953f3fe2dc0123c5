#!/usr/bin/env python3
"""
Provider Parser Base

Every supported payment provider sends notification emails built from a
fixed template of "label<delimiter>value" lines. The base class scans a body
line by line, splits recognized lines into key and value, and hands each pair
to the provider's ``apply`` method. Later lines overwrite earlier ones, so the
last matching line for a field wins.

Parsing never raises for an unrecognized body; the record simply keeps its
zero values and fails validation later. Malformed amounts or dates raise
ValueError, which the watcher treats as an unprocessable email.
"""

import logging
import re
from collections.abc import Iterator
from datetime import datetime, timedelta, tzinfo

from ..core.dates import DEFAULT_TIMEZONE, Clock, get_timezone, system_clock, to_ledger_date
from ..core.models import TransactionRecord

logger = logging.getLogger(__name__)


class ProviderParser:
    """
    Line-scanning parser for one provider's notification emails.

    Subclasses declare their label vocabulary through class attributes and
    implement ``apply``; ``finish`` can fill in fields that depend on the
    whole body (such as a fallback date for top-ups).
    """

    # Identity
    name: str = ""
    display_name: str = ""

    # Where the notifications arrive
    tag: str = ""
    subject_keyword: str = ""

    # Polling defaults
    poll_interval: float = 60.0
    lookback: timedelta = timedelta(0)

    # Template vocabulary
    label_prefixes: tuple[str, ...] = ()
    delimiter: str = "："

    # Ledger labels
    ledger_source: str = ""
    points_label: str = ""
    cash_label: str = ""
    # Export only the points and cash parts; the card part reaches the ledger
    # through the card statement.
    split_channels: bool = False

    record_type: type[TransactionRecord] = TransactionRecord

    def __init__(self, clock: Clock = system_clock, timezone: str | tzinfo = DEFAULT_TIMEZONE):
        """
        Args:
            clock: Source of "now" for top-ups whose email has no usable date
            timezone: Timezone in which calendar dates are reported
        """
        self.clock = clock
        self.tz = get_timezone(timezone) if isinstance(timezone, str) else timezone
        self._delimiter = re.compile(self.delimiter)

    def parse(self, body: str, received_at: datetime | None = None) -> TransactionRecord:
        """
        Parse one email body into a transaction record.

        Args:
            body: Rendered HTML or plain-text email body
            received_at: When the email was received, if the source knows

        Returns:
            Record with whatever fields were recognized (possibly none)

        Raises:
            ValueError: If a recognized amount or date cannot be parsed
        """
        record = self.record_type()
        for key, value in self.iter_fields(body):
            self.apply(record, key, value, received_at)
        self.finish(record, received_at)
        return record

    def iter_fields(self, body: str) -> Iterator[tuple[str, str]]:
        """Yield (key, value) pairs from lines that start with a known label."""
        for raw_line in body.splitlines():
            line = raw_line.strip()
            if not line.startswith(self.label_prefixes):
                continue

            parts = self._delimiter.split(line, maxsplit=1)
            if len(parts) != 2:
                logger.debug(f"[{self.name}] label line without value: {line!r}")
                continue

            yield parts[0].strip(), parts[1].strip()

    def apply(self, record: TransactionRecord, key: str, value: str, received_at: datetime | None) -> None:
        """Update ``record`` from one recognized line. Unknown keys are ignored."""
        raise NotImplementedError

    def finish(self, record: TransactionRecord, received_at: datetime | None) -> None:
        """Hook run after all lines have been applied."""

    def auxiliary_date(self, received_at: datetime | None) -> str:
        """Date to use when the body carries none: receipt time, else now."""
        moment = received_at if received_at is not None else self.clock()
        return to_ledger_date(moment, self.tz)

    def tagged(self, merchant: str = "") -> str:
        """Merchant label with the provider tag appended."""
        return f"{merchant} [{self.display_name}]".strip()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
