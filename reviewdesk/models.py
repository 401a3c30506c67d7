"""Review record: one reviewer's answer to one catalog question."""

from pydantic import BaseModel, ConfigDict, Field

MIN_RATING = 0
MAX_RATING = 5


class CatalogEntry(BaseModel):
    """A (category, question) pair from the question catalog."""

    model_config = ConfigDict(frozen=True)

    category: str
    question: str


class Review(BaseModel):
    """Rating + advice for a single catalog question.

    Frozen: state updates replace the record in its slot, so snapshots
    handed to the submission pipeline never change underneath it.
    """

    model_config = ConfigDict(frozen=True)

    category: str
    question: str
    rating: int = Field(default=0, ge=MIN_RATING, le=MAX_RATING)  # 0 = unrated
    advice: str = ""

    @classmethod
    def from_entry(cls, entry: CatalogEntry) -> "Review":
        return cls(category=entry.category, question=entry.question)

    @property
    def is_blank(self) -> bool:
        """True when the question text is empty or whitespace only."""
        return not self.question.strip()
