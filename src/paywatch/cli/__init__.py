"""
Command Line Interface Package

Command Structure:
- paywatch run: Start one watcher per provider and export new transactions
- paywatch parse: Parse a saved email body for troubleshooting templates
- paywatch config: Show the effective configuration (credentials redacted)
- paywatch version: Show version information
"""
