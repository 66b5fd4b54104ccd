"""
targz test suite.

This package contains:
- unit/: Unit tests (path helpers, errors, settings, CLI)
- integration/: compress() against a real filesystem in tmp_path
"""
