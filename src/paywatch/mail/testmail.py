#!/usr/bin/env python3
"""
testmail.app Email Source

Reads payment notifications forwarded to a testmail.app namespace. Each
provider forwards to its own tag (``{namespace}.{tag}@inbox.testmail.app``),
so one client instance is bound to one tag.
"""

import logging
from datetime import datetime, timezone
from typing import Any

import requests

from ..core.config import TestmailConfig
from .base import MailSourceError
from .models import Email

logger = logging.getLogger(__name__)

# Largest page the JSON API hands out in one response
PAGE_LIMIT = 100


class TestmailClient:
    """Fetches emails for one tag from the testmail.app JSON API."""

    __test__ = False  # not a pytest test class

    def __init__(
        self,
        api_key: str,
        namespace: str,
        tag: str,
        base_url: str = "https://api.testmail.app/api/json",
        timeout: int = 30,
        session: requests.Session | None = None,
    ):
        self.api_key = api_key
        self.namespace = namespace
        self.tag = tag
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config: TestmailConfig, tag: str) -> "TestmailClient":
        """Create a client for ``tag`` from the testmail settings."""
        return cls(
            api_key=config.api_key or "",
            namespace=config.namespace or "",
            tag=tag,
            base_url=config.base_url,
            timeout=config.timeout,
        )

    def fetch(self, since: datetime) -> list[Email]:
        """
        Fetch emails received at or after ``since``, oldest first.

        Raises:
            MailSourceError: On network errors, HTTP errors or a failed API result
        """
        timestamp_from = int(since.timestamp() * 1000)
        raw_emails: list[dict[str, Any]] = []

        while True:
            payload = self._get_page(timestamp_from, offset=len(raw_emails))
            page = payload.get("emails") or []
            raw_emails.extend(page)

            total = payload.get("count") or 0
            if not page or len(raw_emails) >= total:
                break

        logger.debug(f"testmail returned {len(raw_emails)} emails for tag '{self.tag}'")

        emails = [self._to_email(raw) for raw in raw_emails]
        emails.sort(key=lambda e: e.received_at or datetime.min.replace(tzinfo=timezone.utc))
        return emails

    def _get_page(self, timestamp_from: int, offset: int) -> dict[str, Any]:
        """Fetch one page of results starting at ``offset``."""
        params: dict[str, Any] = {
            "apikey": self.api_key,
            "namespace": self.namespace,
            "tag": self.tag,
            "timestamp_from": timestamp_from,
            "limit": PAGE_LIMIT,
            "offset": offset,
        }

        try:
            response = self.session.get(self.base_url, params=params, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            raise MailSourceError(f"testmail request for tag '{self.tag}' failed: {e}") from e

        if payload.get("result") != "success":
            raise MailSourceError(f"testmail returned '{payload.get('result')}': {payload.get('message')}")

        return payload

    def _to_email(self, raw: dict[str, Any]) -> Email:
        """Convert one API email object to an Email."""
        return Email(
            id=str(raw.get("id") or raw.get("oid") or ""),
            subject=raw.get("subject") or "",
            html=raw.get("html") or None,
            text=raw.get("text") or None,
            download_url=raw.get("downloadUrl"),
            received_at=_from_epoch_millis(raw.get("date") or raw.get("timestamp")),
        )


def _from_epoch_millis(value: Any) -> datetime | None:
    """Convert an epoch-milliseconds value to an aware UTC datetime."""
    if value is None:
        return None
    try:
        return datetime.fromtimestamp(int(value) / 1000, tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        logger.warning(f"Ignoring unreadable email timestamp: {value!r}")
        return None
