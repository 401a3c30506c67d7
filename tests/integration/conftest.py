"""Integration test configuration: auto-skip when no live backend is available."""

import os

import pytest


def pytest_configure(config):
    config.addinivalue_line(
        "markers",
        "integration: marks tests requiring a live MongoDB server"
        " (deselect with '-m \"not integration\"')",
    )


def pytest_collection_modifyitems(config, items):
    """Auto-skip integration tests unless REVIEWDESK_INTEGRATION=1."""
    if os.environ.get("REVIEWDESK_INTEGRATION") == "1":
        return
    skip_integration = pytest.mark.skip(
        reason="Set REVIEWDESK_INTEGRATION=1 to run integration tests"
    )
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)
