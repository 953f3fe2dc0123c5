#!/usr/bin/env python3
"""Email source interface."""

from datetime import datetime
from typing import Protocol

from .models import Email


class MailSourceError(Exception):
    """The email source could not be reached or returned an error."""


class EmailSource(Protocol):
    """Anything that can list emails received since a point in time."""

    def fetch(self, since: datetime) -> list[Email]:
        """
        Fetch emails received at or after ``since``, oldest first.

        Raises:
            MailSourceError: On any transport or server fault
        """
        ...
