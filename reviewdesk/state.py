"""In-memory review state for one review screen session.

Records are addressed by their catalog index, which stays stable for the
life of a session because the catalog never changes after seeding.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Iterator

from reviewdesk.models import MAX_RATING, MIN_RATING, CatalogEntry, Review

logger = logging.getLogger(__name__)


def clamp_rating(value: float) -> int:
    """Clamp ``value`` into [0, 5] and truncate it to a whole star count."""
    if math.isnan(value):
        return MIN_RATING
    return int(min(max(value, MIN_RATING), MAX_RATING))


class ReviewState:
    """Ordered, index-addressed collection of ``Review`` records."""

    def __init__(self) -> None:
        self._reviews: list[Review] = []

    def seed(self, catalog: Iterable[CatalogEntry]) -> None:
        """Replace the collection with one unrated review per catalog entry.

        Blank questions are kept so indices line up with the catalog; the
        view layer decides whether to show them.
        """
        self._reviews = [Review.from_entry(entry) for entry in catalog]

    def _in_range(self, index: int) -> bool:
        # Negative indices are out of range, not counted from the end
        return 0 <= index < len(self._reviews)

    def set_rating(self, index: int, value: float) -> None:
        """Store ``clamp(value, 0, 5)`` at ``index``; no-op when out of range."""
        if not self._in_range(index):
            logger.debug("Ignoring rating for out-of-range index %d", index)
            return
        self._reviews[index] = self._reviews[index].model_copy(
            update={"rating": clamp_rating(value)}
        )

    def set_advice(self, index: int, text: str) -> None:
        """Store ``text`` verbatim at ``index``; no-op when out of range."""
        if not self._in_range(index):
            logger.debug("Ignoring advice for out-of-range index %d", index)
            return
        self._reviews[index] = self._reviews[index].model_copy(
            update={"advice": text}
        )

    def snapshot(self) -> tuple[Review, ...]:
        """Immutable copy of the current records for submission."""
        return tuple(self._reviews)

    def __len__(self) -> int:
        return len(self._reviews)

    def __getitem__(self, index: int) -> Review:
        return self._reviews[index]

    def __iter__(self) -> Iterator[Review]:
        return iter(self._reviews)
