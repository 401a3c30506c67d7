"""Load and validate the question catalog payload.

The packaged ``questions.json`` is the default source. Its shape is::

    {"reviews": [{"category": "...", "question": "...", "rating": 0, "advice": ""}]}

``rating`` and ``advice`` may be present in the file but are ignored: a
freshly loaded catalog always seeds unrated reviews.
"""

from __future__ import annotations

import asyncio
import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any

from reviewdesk.errors import MalformedCatalogError
from reviewdesk.models import CatalogEntry

logger = logging.getLogger(__name__)

CATALOG_KEY = "reviews"
PACKAGED_CATALOG = "questions.json"


def _read_packaged() -> str:
    return resources.files("reviewdesk.catalog").joinpath(PACKAGED_CATALOG).read_text(
        encoding="utf-8"
    )


def _read_payload(path: str | None) -> str:
    if not path:
        return _read_packaged()
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise MalformedCatalogError(f"cannot read catalog file {path}: {e}") from e


def _parse_entry(position: int, raw: Any) -> CatalogEntry:
    if not isinstance(raw, dict):
        raise MalformedCatalogError(f"entry {position} is not an object")
    category = raw.get("category")
    question = raw.get("question")
    if not isinstance(category, str):
        raise MalformedCatalogError(f"entry {position} has no string 'category'")
    if not isinstance(question, str):
        raise MalformedCatalogError(f"entry {position} has no string 'question'")
    return CatalogEntry(category=category, question=question)


def parse_catalog(payload: str) -> list[CatalogEntry]:
    """Parse a catalog JSON payload into ordered entries.

    Raises:
        MalformedCatalogError: invalid JSON, missing/non-list ``reviews``
            key, or an entry without string ``category``/``question``.
    """
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise MalformedCatalogError(f"invalid JSON: {e}") from e

    if not isinstance(data, dict) or CATALOG_KEY not in data:
        raise MalformedCatalogError(f"missing top-level '{CATALOG_KEY}' key")
    entries = data[CATALOG_KEY]
    if not isinstance(entries, list):
        raise MalformedCatalogError(f"'{CATALOG_KEY}' must be a list")

    return [_parse_entry(i, raw) for i, raw in enumerate(entries)]


def load_catalog(path: str | None = None) -> list[CatalogEntry]:
    """Load the catalog from ``path``, or the packaged payload when unset."""
    entries = parse_catalog(_read_payload(path))
    logger.info("Loaded %d catalog questions", len(entries))
    return entries


class CatalogLoader:
    """Async catalog source used by the review screen's load task."""

    def __init__(self, path: str | None = None) -> None:
        self.path = path or None

    async def load(self) -> list[CatalogEntry]:
        return await asyncio.to_thread(load_catalog, self.path)
