"""Request/response schemas for the review screen endpoints."""

from pydantic import BaseModel


class AdviceRequest(BaseModel):
    text: str


class QuestionBlockView(BaseModel):
    index: int
    category: str
    question: str
    rating: int
    advice: str
    stars: str  # glyph strip, e.g. "★★★☆☆"
    rating_label: str  # e.g. "3.0/5.0"


class ScreenView(BaseModel):
    session_id: str
    loading: bool
    status: str
    blocks: list[QuestionBlockView] = []


class SubmitAccepted(BaseModel):
    session_id: str
    status: str  # "pending"
