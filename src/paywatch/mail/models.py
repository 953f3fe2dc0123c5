#!/usr/bin/env python3
"""Email value type shared by all email sources."""

from dataclasses import dataclass
from datetime import datetime

from .content import html_to_text


@dataclass
class Email:
    """A notification email as returned by an email source."""

    id: str = ""
    subject: str = ""
    html: str | None = None
    text: str | None = None
    download_url: str | None = None  # where an operator can inspect the original
    received_at: datetime | None = None

    def body(self) -> str | None:
        """
        Text the parsers should read.

        Rendered HTML wins over the plain-text part; returns None when the
        email carries neither.
        """
        if self.html:
            return html_to_text(self.html)
        if self.text:
            return self.text
        return None

    @property
    def locator(self) -> str:
        """Best available reference for log messages."""
        return self.download_url or self.id or self.subject or "<unknown email>"
