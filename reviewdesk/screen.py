"""Review screen: owns one reviewer's session from mount to unmount.

The screen holds the loading flag, the status line, the ``ReviewState`` and
one ``StarRating`` per question. Catalog loading and submission run as
background tasks on the event loop; both report their outcome by
overwriting ``status`` and never raise into the loop.
"""

from __future__ import annotations

import asyncio
import functools
import logging
import uuid
from collections.abc import Coroutine, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from reviewdesk.errors import CatalogError, SubmitError
from reviewdesk.models import CatalogEntry, Review
from reviewdesk.state import ReviewState
from reviewdesk.submission import SubmissionPipeline
from reviewdesk.widgets import StarRating

logger = logging.getLogger(__name__)


class CatalogSource(Protocol):
    async def load(self) -> Sequence[CatalogEntry]: ...


@dataclass
class QuestionBlock:
    """One visible question: its catalog index, record and rating widget."""

    index: int
    review: Review
    widget: StarRating


class ReviewScreen:
    """Session owner for a single review screen."""

    def __init__(
        self,
        catalog: CatalogSource,
        pipeline: SubmissionPipeline,
        session_id: str | None = None,
    ) -> None:
        self.session_id = session_id or str(uuid.uuid4())
        self.catalog = catalog
        self.pipeline = pipeline
        self.state: ReviewState | None = None
        self.widgets: list[StarRating] = []
        self.loading = False
        self.mounted = False
        self.status = ""
        self._tasks: set[asyncio.Task[None]] = set()
        self._submissions_in_flight = 0

    # --- Lifecycle ---

    def mount(self) -> None:
        """Show the loading indicator and start loading the catalog."""
        self.mounted = True
        self.loading = True
        self._spawn(self._load())

    def unmount(self) -> None:
        """Drop the session's state. Pending tasks keep running to completion."""
        self.mounted = False
        self.state = None
        self.widgets = []

    async def wait_idle(self) -> None:
        """Wait until every spawned load/submit task has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task[None]:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    # --- Background tasks ---

    async def _load(self) -> None:
        try:
            entries = await self.catalog.load()
        except CatalogError as e:
            logger.warning("Catalog load failed for session %s: %s", self.session_id, e)
            self.status = f"Error loading questions: {e}"
        except Exception as e:
            logger.exception("Catalog load crashed for session %s", self.session_id)
            self.status = f"Error loading questions: {type(e).__name__}: {e}"
        else:
            if self.mounted:
                self._seed(entries)
        finally:
            self.loading = False

    def _seed(self, entries: Sequence[CatalogEntry]) -> None:
        state = ReviewState()
        state.seed(entries)
        self.state = state
        self.widgets = [
            StarRating(
                initial_rating=float(review.rating),
                on_rate=functools.partial(state.set_rating, index),
            )
            for index, review in enumerate(state)
        ]

    async def _submit(self, reviews: Sequence[Review]) -> None:
        try:
            self.status = await self.pipeline.submit(reviews)
        except SubmitError as e:
            self.status = e.message
        except Exception as e:
            logger.exception("Submission crashed for session %s", self.session_id)
            self.status = f"Error submitting reviews: {type(e).__name__}: {e}"
        finally:
            self._submissions_in_flight -= 1

    # --- User actions ---

    @property
    def ready(self) -> bool:
        return not self.loading and self.state is not None

    @property
    def idle(self) -> bool:
        """No catalog load or submission still running."""
        return not self.loading and not self._tasks

    def submit(self) -> asyncio.Task[None] | None:
        """Snapshot the current answers and send them in the background.

        Returns None when there is nothing to submit (still loading, or the
        catalog failed to load). A submission already in flight does not
        block a new one; whichever finishes last sets the status line.
        """
        if not self.ready:
            return None
        assert self.state is not None
        reviews = self.state.snapshot()
        if self._submissions_in_flight:
            logger.info(
                "Session %s: new submission while %d still in flight",
                self.session_id,
                self._submissions_in_flight,
            )
        self._submissions_in_flight += 1
        return self._spawn(self._submit(reviews))

    def set_advice(self, index: int, text: str) -> None:
        if self.state is not None:
            self.state.set_advice(index, text)

    def widget(self, index: int) -> StarRating | None:
        if 0 <= index < len(self.widgets):
            return self.widgets[index]
        return None

    def hover(self, index: int, star: int) -> None:
        widget = self.widget(index)
        if widget is not None:
            widget.on_hover_enter(star)

    def leave(self, index: int) -> None:
        widget = self.widget(index)
        if widget is not None:
            widget.on_hover_leave()

    def click(self, index: int, star: int) -> None:
        widget = self.widget(index)
        if widget is not None:
            widget.on_click(star)

    # --- View ---

    def blocks(self) -> list[QuestionBlock]:
        """Question blocks to render; blank questions keep their slot but are skipped."""
        if not self.ready:
            return []
        assert self.state is not None
        return [
            QuestionBlock(index=index, review=review, widget=self.widgets[index])
            for index, review in enumerate(self.state)
            if not review.is_blank
        ]
