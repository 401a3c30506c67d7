"""Review screen endpoints: mount a session, rate, advise, submit."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, HTTPException, Path, Request

from reviewdesk.catalog import CatalogLoader
from reviewdesk.config import settings
from reviewdesk.screen import ReviewScreen
from reviewdesk.schemas.review import (
    AdviceRequest,
    QuestionBlockView,
    ScreenView,
    SubmitAccepted,
)
from reviewdesk.submission import SubmissionPipeline
from reviewdesk.widgets import STAR_COUNT

router = APIRouter(prefix="/review")
logger = logging.getLogger(__name__)

# Mounted screens, keyed by session id, least recently used first.
_screens: dict[str, ReviewScreen] = {}
MAX_SCREENS = settings.max_review_sessions

Star = Annotated[int, Path(ge=1, le=STAR_COUNT)]


def get_screens() -> dict[str, ReviewScreen]:
    """Accessor for the in-memory screen registry (test compatibility)."""
    return _screens


def _get_pipeline(request: Request) -> SubmissionPipeline:
    pipeline = getattr(request.app.state, "pipeline", None)
    if pipeline is None:
        raise HTTPException(status_code=503, detail="Submission pipeline not available")
    return pipeline


def _get_catalog(request: Request) -> CatalogLoader:
    catalog = getattr(request.app.state, "catalog", None)
    return catalog if catalog is not None else CatalogLoader()


def _get_screen(session_id: str) -> ReviewScreen:
    screen = _screens.pop(session_id, None)
    if screen is None:
        raise HTTPException(status_code=404, detail="Review session not found")
    _screens[session_id] = screen
    return screen


def _evict_idle_screens() -> None:
    """Unmount least recently used idle screens until one more fits.

    Screens still loading or submitting are never evicted, so the registry
    may exceed ``MAX_SCREENS`` while they run.
    """
    for session_id, screen in list(_screens.items()):
        if len(_screens) < MAX_SCREENS:
            return
        if screen.idle:
            del _screens[session_id]
            screen.unmount()
            logger.info("Evicted idle review session %s", session_id)


def _require_widget(screen: ReviewScreen, index: int) -> None:
    if screen.widget(index) is None:
        raise HTTPException(status_code=404, detail=f"No question at index {index}")


def _view(screen: ReviewScreen) -> ScreenView:
    return ScreenView(
        session_id=screen.session_id,
        loading=screen.loading,
        status=screen.status,
        blocks=[
            QuestionBlockView(
                index=block.index,
                category=block.review.category,
                question=block.review.question,
                rating=block.review.rating,
                advice=block.review.advice,
                stars=block.widget.render(),
                rating_label=block.widget.label,
            )
            for block in screen.blocks()
        ],
    )


@router.post("/sessions", response_model=ScreenView, status_code=201)
async def mount_screen(request: Request):
    """Mount a new review screen and start loading the catalog."""
    screen = ReviewScreen(_get_catalog(request), _get_pipeline(request))
    _evict_idle_screens()
    _screens[screen.session_id] = screen
    screen.mount()
    logger.info("Mounted review session %s", screen.session_id)
    return _view(screen)


@router.get("/sessions/{session_id}", response_model=ScreenView)
async def get_screen(session_id: str):
    return _view(_get_screen(session_id))


@router.delete("/sessions/{session_id}", status_code=204)
async def unmount_screen(session_id: str):
    screen = _screens.pop(session_id, None)
    if screen is None:
        raise HTTPException(status_code=404, detail="Review session not found")
    screen.unmount()
    logger.info("Unmounted review session %s", session_id)


@router.put("/sessions/{session_id}/questions/{index}/advice", response_model=ScreenView)
async def set_advice(session_id: str, index: int, req: AdviceRequest):
    """Store advice verbatim. Out-of-range indices are ignored."""
    screen = _get_screen(session_id)
    screen.set_advice(index, req.text)
    return _view(screen)


@router.post(
    "/sessions/{session_id}/questions/{index}/stars/{star}/hover",
    response_model=ScreenView,
)
async def hover_star(session_id: str, index: int, star: Star):
    screen = _get_screen(session_id)
    _require_widget(screen, index)
    screen.hover(index, star)
    return _view(screen)


@router.delete("/sessions/{session_id}/questions/{index}/hover", response_model=ScreenView)
async def leave_stars(session_id: str, index: int):
    screen = _get_screen(session_id)
    _require_widget(screen, index)
    screen.leave(index)
    return _view(screen)


@router.post(
    "/sessions/{session_id}/questions/{index}/stars/{star}/click",
    response_model=ScreenView,
)
async def click_star(session_id: str, index: int, star: Star):
    screen = _get_screen(session_id)
    _require_widget(screen, index)
    screen.click(index, star)
    return _view(screen)


@router.post("/sessions/{session_id}/submit", response_model=SubmitAccepted, status_code=202)
async def submit_reviews(session_id: str):
    """Start a background submission; poll the session for the outcome."""
    screen = _get_screen(session_id)
    if screen.submit() is None:
        raise HTTPException(status_code=409, detail="No questions loaded to submit")
    return SubmitAccepted(session_id=session_id, status="pending")
