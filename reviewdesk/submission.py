"""Submission pipeline: sends a review snapshot to the persistence backend.

Two deployment modes share the same contract:

- ``StoreSubmissionPipeline`` writes through a backend store (MongoDB or SQLite).
- ``DryRunSubmissionPipeline`` runs without persistence and only reports how
  many reviews would have been written.

``submit`` returns the success status line or raises ``SubmitError``. There
is no retry, rollback or partial commit: one bulk call, whatever atomicity
the backend provides. A store call that outlives ``timeout_seconds`` is
reported as an unavailable backend.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Protocol

from reviewdesk.config import Settings
from reviewdesk.errors import BackendUnavailableError
from reviewdesk.models import Review
from reviewdesk.persistence import MongoReviewStore, SqliteReviewStore

logger = logging.getLogger(__name__)

SUCCESS_STATUS = "Reviews submitted successfully!"


class ReviewStore(Protocol):
    name: str

    async def insert_many(self, reviews: Sequence[Review]) -> None: ...

    async def close(self) -> None: ...


class SubmissionPipeline(Protocol):
    backend_name: str

    async def submit(self, reviews: Sequence[Review]) -> str: ...

    async def close(self) -> None: ...


class StoreSubmissionPipeline:
    """Writes the full snapshot to a backend store in one bulk call."""

    def __init__(self, store: ReviewStore, timeout_seconds: float = 10.0) -> None:
        self.store = store
        self.backend_name = store.name
        self.timeout_seconds = timeout_seconds

    async def submit(self, reviews: Sequence[Review]) -> str:
        logger.info("Submitting %d reviews to %s", len(reviews), self.backend_name)
        try:
            await asyncio.wait_for(
                self.store.insert_many(list(reviews)), self.timeout_seconds
            )
        except TimeoutError as e:
            logger.warning(
                "Submission to %s timed out after %.1fs",
                self.backend_name,
                self.timeout_seconds,
            )
            raise BackendUnavailableError(
                f"Persistence backend unavailable: {self.backend_name} did not "
                f"respond within {self.timeout_seconds:g}s"
            ) from e
        return SUCCESS_STATUS

    async def close(self) -> None:
        await self.store.close()


class DryRunSubmissionPipeline:
    """No persistence backend: report what would have been submitted."""

    backend_name = "none"

    async def submit(self, reviews: Sequence[Review]) -> str:
        status = f"Would submit {len(reviews)} reviews (no persistence backend configured)"
        logger.info(status)
        return status

    async def close(self) -> None:
        return None


def build_pipeline(settings: Settings) -> SubmissionPipeline:
    """Select the submission pipeline for the configured backend."""
    if settings.review_backend == "mongodb":
        return StoreSubmissionPipeline(
            MongoReviewStore(
                settings.mongodb_uri,
                settings.mongodb_database,
                settings.mongodb_collection,
                timeout_seconds=settings.backend_timeout_seconds,
            ),
            timeout_seconds=settings.backend_timeout_seconds,
        )
    if settings.review_backend == "sqlite":
        return StoreSubmissionPipeline(
            SqliteReviewStore(settings.sqlite_path),
            timeout_seconds=settings.backend_timeout_seconds,
        )
    return DryRunSubmissionPipeline()
