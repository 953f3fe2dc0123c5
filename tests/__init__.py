"""
Test Suite for paywatch

Test Structure:
- fixtures/: Sample notification emails
- unit/: Unit tests mirroring src/ package structure
- integration/: CLI and watch pipeline tests

Test Categories:
- Core utilities (yen amounts, dates, models, config)
- Provider parsers
- Email sources (testmail.app, IMAP)
- Watcher polling and delivery
- Ledger export

Test Data:
All sample emails use synthetic merchants and amounts.
"""
