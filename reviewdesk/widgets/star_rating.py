"""Five-star rating control.

Hover previews a rating, click commits one. The widget knows nothing about
which question it rates; the owner passes an ``on_rate`` callback to hear
about commits.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable

STAR_COUNT = 5


class Glyph(str, Enum):
    FULL = "★"
    HALF = "⯨"
    EMPTY = "☆"

    @property
    def rank(self) -> int:
        return _GLYPH_RANK[self]


_GLYPH_RANK = {Glyph.EMPTY: 0, Glyph.HALF: 1, Glyph.FULL: 2}


def render_glyph(star_index: float, hover_rating: float, current_rating: float) -> Glyph:
    """Glyph for ``star_index`` given hover and committed ratings.

    The hover value wins while the pointer is over the control, otherwise the
    committed rating is shown.
    """
    effective = hover_rating if hover_rating > 0 else current_rating
    if effective >= star_index:
        return Glyph.FULL
    if effective >= star_index - 0.5:
        return Glyph.HALF
    return Glyph.EMPTY


def _check_star(star_index: int) -> None:
    if not 1 <= star_index <= STAR_COUNT:
        raise ValueError(f"star index must be in 1..{STAR_COUNT}, got {star_index}")


class StarRating:
    """Interactive rating control over five ordered star positions.

    Clicks always commit whole stars. A half-star value can only come in
    through ``initial_rating``.
    """

    def __init__(
        self,
        initial_rating: float | None = None,
        on_rate: Callable[[float], None] | None = None,
    ) -> None:
        self.current_rating: float = initial_rating if initial_rating is not None else 0.0
        self.hover_rating: float = 0.0
        self.on_rate = on_rate

    def on_hover_enter(self, star_index: int) -> None:
        _check_star(star_index)
        self.hover_rating = float(star_index)

    def on_hover_leave(self) -> None:
        self.hover_rating = 0.0

    def on_click(self, star_index: int) -> None:
        _check_star(star_index)
        self.current_rating = float(star_index)
        if self.on_rate is not None:
            self.on_rate(self.current_rating)

    def glyphs(self) -> list[Glyph]:
        return [
            render_glyph(star, self.hover_rating, self.current_rating)
            for star in range(1, STAR_COUNT + 1)
        ]

    def render(self) -> str:
        """Glyph strip, e.g. ``"★★★☆☆"``."""
        return "".join(glyph.value for glyph in self.glyphs())

    @property
    def label(self) -> str:
        return f"{self.current_rating:.1f}/{STAR_COUNT:.1f}"
