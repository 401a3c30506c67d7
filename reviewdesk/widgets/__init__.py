"""Interactive input widgets for the review screen."""

from reviewdesk.widgets.star_rating import STAR_COUNT, Glyph, StarRating, render_glyph

__all__ = ["STAR_COUNT", "Glyph", "StarRating", "render_glyph"]
