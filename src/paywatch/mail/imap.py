#!/usr/bin/env python3
"""
IMAP Email Source

Reads payment notifications straight from a mailbox instead of a testmail.app
namespace. IMAP SEARCH only has day granularity and is unreliable with
non-ASCII criteria, so the server is asked for everything since the day of
``since`` and the subject/timestamp filtering happens here.
"""

import email
import email.header
import email.message
import email.utils
import imaplib
import logging
from datetime import datetime

from ..core.config import EmailConfig
from .base import MailSourceError
from .models import Email

logger = logging.getLogger(__name__)


class ImapEmailSource:
    """
    Fetches one provider's notification emails from an IMAP folder.

    A new connection is opened for every fetch and closed afterwards, so a
    dropped connection only costs one poll.
    """

    def __init__(self, config: EmailConfig, subject_keyword: str, folder: str | None = None):
        self.config = config
        self.subject_keyword = subject_keyword
        self.folder = folder or config.folder
        self.connection: imaplib.IMAP4_SSL | None = None

    def connect(self) -> None:
        """
        Connect and log in to the IMAP server.

        Raises:
            MailSourceError: If the server is unreachable or rejects the login
        """
        try:
            logger.debug(f"Connecting to IMAP server: {self.config.imap_server}:{self.config.imap_port}")
            self.connection = imaplib.IMAP4_SSL(self.config.imap_server, self.config.imap_port)
            self.connection.login(self.config.username or "", self.config.password or "")
        except (imaplib.IMAP4.error, OSError) as e:
            self.connection = None
            raise MailSourceError(f"Failed to connect to IMAP server: {e}") from e

    def disconnect(self) -> None:
        """Disconnect from IMAP server."""
        if self.connection:
            try:
                self.connection.close()
                self.connection.logout()
            except (imaplib.IMAP4.error, OSError) as e:
                logger.warning(f"Error during disconnect: {e}")
            finally:
                self.connection = None

    def fetch(self, since: datetime) -> list[Email]:
        """
        Fetch matching emails received at or after ``since``, oldest first.

        Raises:
            MailSourceError: On connection, folder selection or search failures
        """
        self.connect()
        try:
            return self._fetch_since(since)
        finally:
            self.disconnect()

    def _fetch_since(self, since: datetime) -> list[Email]:
        if not self.connection:
            raise MailSourceError("IMAP connection lost")

        try:
            result, _ = self.connection.select(self._quote(self.folder), readonly=True)
            if result != "OK":
                raise MailSourceError(f"Cannot select folder '{self.folder}'")

            result, uids = self.connection.uid("SEARCH", None, "SINCE", since.strftime("%d-%b-%Y"))
        except (imaplib.IMAP4.error, OSError) as e:
            raise MailSourceError(f"IMAP search failed in '{self.folder}': {e}") from e

        if result != "OK":
            raise MailSourceError(f"IMAP search failed in '{self.folder}': {result}")
        if not uids or not uids[0]:
            return []

        emails = []
        for uid in uids[0].split():
            parsed = self._fetch_and_parse_email(uid.decode())
            if parsed is None:
                continue
            if self.subject_keyword not in parsed.subject:
                continue
            if parsed.received_at is not None and parsed.received_at < since:
                continue
            emails.append(parsed)

        logger.debug(f"Found {len(emails)} '{self.subject_keyword}' emails in '{self.folder}'")
        emails.sort(key=lambda e: e.received_at or since)
        return emails

    def _fetch_and_parse_email(self, uid: str) -> Email | None:
        """Fetch and parse a single email."""
        if not self.connection:
            raise MailSourceError("IMAP connection lost")

        try:
            result, msg_data = self.connection.uid("FETCH", uid, "(RFC822)")
        except (imaplib.IMAP4.error, OSError) as e:
            raise MailSourceError(f"Error fetching email UID {uid}: {e}") from e

        if result != "OK" or not msg_data or not msg_data[0]:
            return None

        raw_email = msg_data[0][1]
        if not isinstance(raw_email, bytes):
            logger.warning(f"Expected bytes but got {type(raw_email)}")
            return None
        msg = email.message_from_bytes(raw_email)

        subject = self._decode_header(msg.get("Subject", ""))
        message_id = msg.get("Message-ID", f"{self.folder}_{uid}")

        try:
            received_at = email.utils.parsedate_to_datetime(msg.get("Date", ""))
        except (TypeError, ValueError):
            received_at = None
        if received_at is not None and received_at.tzinfo is None:
            received_at = received_at.astimezone()

        html_content, text_content = self._extract_email_content(msg)

        return Email(
            id=message_id,
            subject=subject,
            html=html_content,
            text=text_content,
            download_url=f"imap://{self.config.imap_server}/{self.folder};UID={uid}",
            received_at=received_at,
        )

    def _extract_email_content(self, msg: email.message.Message) -> tuple[str | None, str | None]:
        """Extract HTML and text content from email message."""
        html_content = None
        text_content = None

        parts = msg.walk() if msg.is_multipart() else [msg]
        for part in parts:
            if "attachment" in str(part.get("Content-Disposition", "")):
                continue

            content_type = part.get_content_type()
            if content_type not in ("text/html", "text/plain"):
                continue

            payload = part.get_payload(decode=True)
            if not payload or not isinstance(payload, bytes):
                continue

            charset = part.get_content_charset() or "utf-8"
            try:
                content = payload.decode(charset, errors="ignore")
            except LookupError:
                content = payload.decode("utf-8", errors="ignore")

            if content_type == "text/html":
                html_content = content
            else:
                text_content = content

        return html_content, text_content

    def _decode_header(self, header: str) -> str:
        """Decode email header with proper encoding handling."""
        if not header:
            return ""

        decoded_parts = []
        for part, encoding in email.header.decode_header(header):
            if isinstance(part, bytes):
                try:
                    decoded_parts.append(part.decode(encoding or "utf-8", errors="ignore"))
                except LookupError:
                    decoded_parts.append(part.decode("utf-8", errors="ignore"))
            else:
                decoded_parts.append(str(part))

        return "".join(decoded_parts)

    @staticmethod
    def _quote(folder: str) -> str:
        if " " in folder and not folder.startswith('"'):
            return f'"{folder}"'
        return folder
