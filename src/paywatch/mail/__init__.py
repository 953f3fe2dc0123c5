"""
Email Sources Package

Adapters that list payment notification emails received since a point in
time, plus the shared Email type and HTML rendering.

Key Components:
- models: Email value type with body selection (rendered HTML, else text)
- content: HTML to line-oriented text rendering
- testmail: testmail.app JSON API adapter (one instance per tag)
- imap: IMAP mailbox adapter (one instance per subject keyword)
"""

from .base import EmailSource, MailSourceError
from .content import html_to_text
from .imap import ImapEmailSource
from .models import Email
from .testmail import TestmailClient

__all__ = [
    "Email",
    "EmailSource",
    "ImapEmailSource",
    "MailSourceError",
    "TestmailClient",
    "html_to_text",
]
