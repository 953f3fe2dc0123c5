"""
Pytest Configuration and Shared Fixtures

Provides common test fixtures and configuration for the entire test suite.
"""

import tempfile
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

from paywatch.core.dates import fixed_clock
from paywatch.mail.models import Email

JST = ZoneInfo("Asia/Tokyo")


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as temp_path:
        yield Path(temp_path)


@pytest.fixture
def jst():
    """The timezone every provider reports dates in."""
    return JST


@pytest.fixture
def now():
    """A fixed 'now' for parsers and watchers."""
    return datetime(2025, 6, 10, 9, 30, 0, tzinfo=JST)


@pytest.fixture
def clock(now):
    """Clock frozen at ``now``."""
    return fixed_clock(now)


@pytest.fixture
def make_email():
    """Factory for Email objects with sensible defaults."""

    def factory(text=None, html=None, url=None, received_at=None, subject="notification"):
        return Email(
            id=url or subject,
            subject=subject,
            html=html,
            text=text,
            download_url=url,
            received_at=received_at,
        )

    return factory


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch, tmp_path):
    """Set up test environment variables."""
    # Ensure tests never pick up real credentials from a developer's .env
    monkeypatch.setenv("PAYWATCH_ENV", "test")
    monkeypatch.setenv("PAYWATCH_DATA_DIR", str(tmp_path / "paywatch_data"))
    monkeypatch.setenv("MAIL_SOURCE", "testmail")
    monkeypatch.setenv("TESTMAIL_API_KEY", "test-api-key")
    monkeypatch.setenv("TESTMAIL_NAMESPACE", "testns")
    for name in (
        "PAYWATCH_PROVIDERS",
        "PAYWATCH_TIMEZONE",
        "LEDGER_URL",
        "LEDGER_USERNAME",
        "LEDGER_PASSWORD",
        "EMAIL_USERNAME",
        "EMAIL_PASSWORD",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


# Test markers for categorizing tests
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests for complete workflows")
    config.addinivalue_line("markers", "currency: Tests for yen amount handling")
    config.addinivalue_line("markers", "providers: Tests for provider email parsers")
    config.addinivalue_line("markers", "watcher: Tests for the polling watcher")
    config.addinivalue_line("markers", "mail: Tests for email sources")
    config.addinivalue_line("markers", "export: Tests for ledger export")
