#!/usr/bin/env python3
"""
Application Wiring

Builds the watchers, email sources and exporters described by a Config.
Everything is created once here and passed down explicitly.
"""

import logging
from datetime import timedelta

from .core.config import Config, MailSourceKind
from .core.dates import Clock, system_clock
from .export.exporters import LedgerExporter, create_exporter
from .export.subscriber import LedgerSubscriber
from .mail.base import EmailSource
from .mail.imap import ImapEmailSource
from .mail.testmail import TestmailClient
from .providers import get_provider
from .providers.base import ProviderParser
from .watcher import PollCallback, Watcher

logger = logging.getLogger(__name__)


def build_email_source(config: Config, provider: ProviderParser) -> EmailSource:
    """Email source delivering ``provider``'s notifications."""
    if config.mail_source == MailSourceKind.IMAP:
        return ImapEmailSource(config.email, subject_keyword=provider.subject_keyword)
    return TestmailClient.from_config(config.testmail, tag=provider.tag)


def build_watchers(
    config: Config,
    provider_names: list[str] | None = None,
    interval: float | None = None,
    lookback: timedelta | None = None,
    clock: Clock = system_clock,
    on_poll: PollCallback | None = None,
    exporter: LedgerExporter | None = None,
) -> list[Watcher]:
    """
    Create one watcher per provider, each exporting to the ledger.

    Args:
        config: Validated configuration
        provider_names: Providers to watch (default: config.providers)
        interval: Poll interval override in seconds
        lookback: First-poll lookback override
        clock: Source of "now" shared by parsers and watchers
        on_poll: Progress callback for every successful fetch
        exporter: Exporter override (default: from config.ledger)
    """
    exporter = exporter or create_exporter(config.ledger, clock=clock)
    watchers = []

    for name in provider_names or config.providers:
        provider = get_provider(name, clock=clock, timezone=config.timezone)
        watcher = Watcher(
            provider,
            build_email_source(config, provider),
            interval=interval,
            lookback=lookback,
            clock=clock,
            on_poll=on_poll,
        )
        watcher.subscribe(LedgerSubscriber(provider, exporter, clock=clock))
        watchers.append(watcher)
        logger.debug(f"Configured watcher for {provider.display_name} via {config.mail_source.value}")

    return watchers
