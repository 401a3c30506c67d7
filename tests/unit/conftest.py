"""Shared test fixtures for reviewdesk unit tests."""

from unittest.mock import AsyncMock

import pytest

from reviewdesk.models import CatalogEntry
from reviewdesk.submission import SUCCESS_STATUS


@pytest.fixture
def catalog_entries():
    """A small catalog with one blank question in the middle."""
    return [
        CatalogEntry(category="Skills", question="Q1"),
        CatalogEntry(category="Culture", question="Q2"),
        CatalogEntry(category="Culture", question="   "),
        CatalogEntry(category="Overall", question="Q4"),
    ]


@pytest.fixture
def mock_catalog(catalog_entries):
    """AsyncMock catalog source returning ``catalog_entries``."""
    catalog = AsyncMock()
    catalog.load.return_value = catalog_entries
    return catalog


@pytest.fixture
def mock_pipeline():
    """AsyncMock submission pipeline that always succeeds."""
    pipeline = AsyncMock()
    pipeline.backend_name = "mock"
    pipeline.submit.return_value = SUCCESS_STATUS
    return pipeline


@pytest.fixture
def malformed_catalog_file(tmp_path):
    path = tmp_path / "questions.json"
    path.write_text('{"questions": []}')
    return str(path)
