"""Root conftest.py for the Rentas test suite.

This file contains project-wide fixtures and pytest configuration.
"""

import os

import pytest

# Importing src.api.main builds the module-level app; keep it from installing
# a tracer provider during collection.
os.environ.setdefault("OBSERVABILITY_CONFIG__ENABLE_TRACING", "false")


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests that test individual components in isolation"
    )
