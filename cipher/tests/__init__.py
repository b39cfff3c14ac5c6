# kaspa-cipher Test Suite
"""
Test suite including:
- Unit tests (core crypto, envelope, address)
- Pipeline tests
- Security tests (tampering, wrong keys, truncation)
- Integration tests (channel, cache, audit log, CLI)

Run with: pytest
Coverage: coverage run -m pytest && coverage report
"""
