#!/usr/bin/env python3
"""
Configuration Management for paywatch

Handles environment-based configuration with validation. The configuration
is built once at startup and passed explicitly to every watcher, email
source and exporter; nothing reads the environment after that.
"""

import logging
import os
import tempfile
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfoNotFoundError

from dotenv import load_dotenv

from .dates import DEFAULT_TIMEZONE, get_timezone

# Load environment variables from .env file
load_dotenv()

DEFAULT_PROVIDERS = ["rakuten", "ana", "vpoint", "jal"]


class ConfigurationError(ValueError):
    """Raised when required settings are missing or invalid."""


class Environment(Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TEST = "test"
    PRODUCTION = "production"


class MailSourceKind(Enum):
    """Where notification emails are read from."""

    TESTMAIL = "testmail"
    IMAP = "imap"


@dataclass
class TestmailConfig:
    """testmail.app inbox settings."""

    __test__ = False  # not a pytest test class

    api_key: str | None = None
    namespace: str | None = None
    base_url: str = "https://api.testmail.app/api/json"
    timeout: int = 30


@dataclass
class EmailConfig:
    """IMAP mailbox settings."""

    imap_server: str = "imap.gmail.com"
    imap_port: int = 993
    username: str | None = None
    password: str | None = None
    folder: str = "INBOX"


@dataclass
class LedgerConfig:
    """Ledger export settings. Without a URL, batches are written as JSON files."""

    output_dir: Path
    url: str | None = None
    username: str | None = None
    password: str | None = None
    timeout: int = 30


@dataclass
class Config:
    """
    Main configuration class for paywatch.

    Loads configuration from environment variables and validates the
    settings each mail source and exporter needs.
    """

    environment: Environment
    data_dir: Path

    mail_source: MailSourceKind
    testmail: TestmailConfig
    email: EmailConfig
    ledger: LedgerConfig

    providers: list[str] = field(default_factory=lambda: list(DEFAULT_PROVIDERS))
    timezone: str = DEFAULT_TIMEZONE

    # Application settings
    debug: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_environment(cls) -> "Config":
        """Create configuration from environment variables."""
        env = Environment(os.getenv("PAYWATCH_ENV", "development"))

        if env == Environment.TEST:
            default_test_dir = Path(tempfile.gettempdir()) / "test_paywatch"
            data_dir = Path(os.getenv("PAYWATCH_DATA_DIR", str(default_test_dir)))
        else:
            data_dir = Path(os.getenv("PAYWATCH_DATA_DIR", "./data")).expanduser().resolve()

        testmail = TestmailConfig(
            api_key=os.getenv("TESTMAIL_API_KEY"),
            namespace=os.getenv("TESTMAIL_NAMESPACE"),
            base_url=os.getenv("TESTMAIL_BASE_URL", "https://api.testmail.app/api/json"),
            timeout=int(os.getenv("TESTMAIL_TIMEOUT", "30")),
        )

        email = EmailConfig(
            imap_server=os.getenv("EMAIL_IMAP_SERVER", "imap.gmail.com"),
            imap_port=int(os.getenv("EMAIL_IMAP_PORT", "993")),
            username=os.getenv("EMAIL_USERNAME"),
            password=os.getenv("EMAIL_PASSWORD"),
            folder=os.getenv("EMAIL_FOLDER", "INBOX"),
        )

        ledger = LedgerConfig(
            output_dir=data_dir / "ledger",
            url=os.getenv("LEDGER_URL"),
            username=os.getenv("LEDGER_USERNAME"),
            password=os.getenv("LEDGER_PASSWORD"),
            timeout=int(os.getenv("LEDGER_TIMEOUT", "30")),
        )

        return cls(
            environment=env,
            data_dir=data_dir,
            mail_source=MailSourceKind(os.getenv("MAIL_SOURCE", "testmail").lower()),
            testmail=testmail,
            email=email,
            ledger=ledger,
            providers=_parse_list(os.getenv("PAYWATCH_PROVIDERS", ",".join(DEFAULT_PROVIDERS))),
            timezone=os.getenv("PAYWATCH_TIMEZONE", DEFAULT_TIMEZONE),
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if self.mail_source == MailSourceKind.TESTMAIL:
            if not self.testmail.api_key:
                errors.append("TESTMAIL_API_KEY env variable missing")
            if not self.testmail.namespace:
                errors.append("TESTMAIL_NAMESPACE env variable missing")
        else:
            if not self.email.username:
                errors.append("EMAIL_USERNAME env variable missing")
            if not self.email.password:
                errors.append("EMAIL_PASSWORD env variable missing")

        if self.ledger.url:
            if not self.ledger.username:
                errors.append("LEDGER_USERNAME is required when LEDGER_URL is set")
            if not self.ledger.password:
                errors.append("LEDGER_PASSWORD is required when LEDGER_URL is set")

        if not self.providers:
            errors.append("PAYWATCH_PROVIDERS must name at least one provider")
        unknown = [name for name in self.providers if name not in DEFAULT_PROVIDERS]
        if unknown:
            errors.append(f"Unknown providers: {', '.join(unknown)}")

        try:
            get_timezone(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            errors.append(f"Unknown timezone: {self.timezone}")

        if self.email.imap_port <= 0 or self.email.imap_port > 65535:
            errors.append("Email IMAP port must be 1-65535")
        if self.testmail.timeout <= 0 or self.ledger.timeout <= 0:
            errors.append("Timeouts must be positive")

        return errors

    def setup_logging(self) -> None:
        """Configure logging based on configuration."""
        level = getattr(logging, self.log_level, logging.INFO)

        if self.environment == Environment.DEVELOPMENT:
            format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        else:
            format_str = "%(asctime)s - %(levelname)s - %(message)s"

        logging.basicConfig(level=level, format=format_str, datefmt="%Y-%m-%d %H:%M:%S")

        # Per-request noise from the HTTP stack drowns out the poll notices
        logging.getLogger("urllib3").setLevel(logging.WARNING)
        logging.getLogger("requests").setLevel(logging.WARNING)

    def get_sensitive_fields(self) -> list[str]:
        """Get list of field names that contain sensitive data."""
        return [
            "testmail.api_key",
            "email.username",
            "email.password",
            "ledger.username",
            "ledger.password",
        ]

    def to_dict(self, include_sensitive: bool = False) -> dict[str, Any]:
        """Convert configuration to dictionary, optionally excluding sensitive data."""
        result: dict[str, Any] = {}

        for field_name, field_value in self.__dict__.items():
            if hasattr(field_value, "__dataclass_fields__"):
                nested_dict: dict[str, Any] = {}
                for nested_name, nested_value in field_value.__dict__.items():
                    full_field_name = f"{field_name}.{nested_name}"

                    if not include_sensitive and full_field_name in self.get_sensitive_fields():
                        nested_dict[nested_name] = "***REDACTED***" if nested_value else None
                    else:
                        nested_dict[nested_name] = _plain(nested_value)

                result[field_name] = nested_dict
            else:
                result[field_name] = _plain(field_value)

        return result


def _plain(value: Any) -> Any:
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    return value


def _parse_list(value: str, delimiter: str = ",") -> list[str]:
    """Parse comma-separated string into list, handling empty values."""
    if not value:
        return []
    return [item.strip().lower() for item in value.split(delimiter) if item.strip()]


def load_config() -> Config:
    """
    Build and validate the configuration from the environment.

    Raises:
        ConfigurationError: If any required setting is missing or invalid
    """
    try:
        config = Config.from_environment()
    except ValueError as e:
        raise ConfigurationError(f"Invalid configuration value: {e}") from e

    errors = config.validate()
    if errors:
        raise ConfigurationError(f"Configuration validation failed: {'; '.join(errors)}")

    return config
