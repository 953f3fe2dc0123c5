"""
Test Fixtures and Utilities

Shared sample emails for the provider, watcher and CLI tests.

All sample data is synthetic and does not contain real transactions.
"""
