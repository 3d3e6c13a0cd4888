"""
Pytest configuration.

Tests run against in-memory SQLite; see tests/__init__.py for the session
factory and tests/fixtures/factories.py for data builders.
"""

import logging


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "api: marks tests that exercise the HTTP layer (deselect with '-m \"not api\"')"
    )
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)
