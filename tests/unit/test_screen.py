"""Unit tests for the review screen session owner."""

import asyncio

import pytest

from reviewdesk.errors import BackendUnavailableError, MalformedCatalogError, WriteFailedError
from reviewdesk.screen import ReviewScreen
from reviewdesk.submission import SUCCESS_STATUS, DryRunSubmissionPipeline


@pytest.fixture
async def screen(mock_catalog, mock_pipeline):
    """A mounted screen with the catalog already loaded."""
    s = ReviewScreen(mock_catalog, mock_pipeline, session_id="sess-1")
    s.mount()
    await s.wait_idle()
    return s


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_mount_shows_loading_until_catalog_arrives(mock_catalog, mock_pipeline):
    s = ReviewScreen(mock_catalog, mock_pipeline)
    s.mount()
    assert s.loading is True
    assert s.blocks() == []
    await s.wait_idle()
    assert s.loading is False
    assert s.status == ""
    mock_catalog.load.assert_awaited_once()


@pytest.mark.asyncio
async def test_idle_only_when_no_load_or_submit_running(mock_catalog, mock_pipeline):
    s = ReviewScreen(mock_catalog, mock_pipeline)
    assert s.idle is True
    s.mount()
    assert s.idle is False
    await s.wait_idle()
    assert s.idle is True
    s.submit()
    assert s.idle is False
    await s.wait_idle()
    assert s.idle is True


@pytest.mark.asyncio
async def test_load_seeds_state_and_widgets(screen, catalog_entries):
    assert screen.state is not None
    assert len(screen.state) == len(catalog_entries)
    assert len(screen.widgets) == len(catalog_entries)
    assert all(w.current_rating == 0.0 for w in screen.widgets)


@pytest.mark.asyncio
async def test_blank_questions_skipped_but_keep_index(screen):
    blocks = screen.blocks()
    assert [b.index for b in blocks] == [0, 1, 3]
    assert [b.review.question for b in blocks] == ["Q1", "Q2", "Q4"]


@pytest.mark.asyncio
async def test_malformed_catalog_reports_status(mock_catalog, mock_pipeline):
    mock_catalog.load.side_effect = MalformedCatalogError("missing top-level 'reviews' key")
    s = ReviewScreen(mock_catalog, mock_pipeline)
    s.mount()
    await s.wait_idle()
    assert s.loading is False
    assert s.status == "Error loading questions: missing top-level 'reviews' key"
    assert s.state is None
    assert s.blocks() == []


@pytest.mark.asyncio
async def test_unexpected_load_error_is_contained(mock_catalog, mock_pipeline):
    mock_catalog.load.side_effect = RuntimeError("boom")
    s = ReviewScreen(mock_catalog, mock_pipeline)
    s.mount()
    await s.wait_idle()
    assert s.status == "Error loading questions: RuntimeError: boom"
    assert s.blocks() == []


@pytest.mark.asyncio
async def test_unmount_before_load_finishes_drops_result(mock_catalog, mock_pipeline):
    s = ReviewScreen(mock_catalog, mock_pipeline)
    s.mount()
    s.unmount()
    await s.wait_idle()
    assert s.state is None
    assert s.widgets == []


# ---------------------------------------------------------------------------
# Interaction
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_click_writes_rating_into_state(screen):
    screen.click(1, 4)
    assert screen.state[1].rating == 4
    assert screen.widgets[1].current_rating == 4.0


@pytest.mark.asyncio
async def test_hover_does_not_touch_state(screen):
    screen.hover(0, 5)
    assert screen.widgets[0].render() == "★★★★★"
    assert screen.state[0].rating == 0
    screen.leave(0)
    assert screen.widgets[0].render() == "☆☆☆☆☆"


@pytest.mark.asyncio
async def test_set_advice(screen):
    screen.set_advice(3, "Ask about the portfolio")
    assert screen.state[3].advice == "Ask about the portfolio"


@pytest.mark.asyncio
async def test_out_of_range_interactions_are_noops(screen):
    before = screen.state.snapshot()
    screen.set_advice(99, "x")
    screen.click(99, 3)
    screen.hover(-1, 3)
    screen.leave(99)
    assert screen.widget(99) is None
    assert screen.state.snapshot() == before


@pytest.mark.asyncio
async def test_interactions_before_load_are_noops(mock_catalog, mock_pipeline):
    s = ReviewScreen(mock_catalog, mock_pipeline)
    s.set_advice(0, "x")
    s.click(0, 3)
    assert s.state is None
    assert s.submit() is None


# ---------------------------------------------------------------------------
# Submission
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_submit_success(screen, mock_pipeline):
    screen.click(0, 3)
    task = screen.submit()
    assert task is not None
    await screen.wait_idle()
    assert screen.status == SUCCESS_STATUS
    sent = mock_pipeline.submit.await_args.args[0]
    assert sent == screen.state.snapshot()
    assert sent[0].rating == 3


@pytest.mark.asyncio
async def test_submit_uses_snapshot_taken_at_submit_time(screen, mock_pipeline):
    screen.submit()
    screen.click(0, 5)
    await screen.wait_idle()
    sent = mock_pipeline.submit.await_args.args[0]
    assert sent[0].rating == 0


@pytest.mark.asyncio
async def test_write_failure_shows_backend_message(screen, mock_pipeline):
    """A duplicate-key failure lands verbatim in the status; retry works."""
    screen.set_advice(0, "kept")
    before = screen.state.snapshot()
    mock_pipeline.submit.side_effect = WriteFailedError("duplicate key")
    screen.submit()
    await screen.wait_idle()
    assert screen.status == "duplicate key"
    assert screen.state.snapshot() == before

    mock_pipeline.submit.side_effect = None
    assert screen.submit() is not None
    await screen.wait_idle()
    assert screen.status == SUCCESS_STATUS
    assert mock_pipeline.submit.await_count == 2


@pytest.mark.asyncio
async def test_backend_unavailable_reported(screen, mock_pipeline):
    mock_pipeline.submit.side_effect = BackendUnavailableError(
        "Persistence backend unavailable: connection refused"
    )
    screen.submit()
    await screen.wait_idle()
    assert screen.status == "Persistence backend unavailable: connection refused"


@pytest.mark.asyncio
async def test_unexpected_submit_error_is_contained(screen, mock_pipeline):
    mock_pipeline.submit.side_effect = ValueError("bad")
    screen.submit()
    await screen.wait_idle()
    assert screen.status == "Error submitting reviews: ValueError: bad"


@pytest.mark.asyncio
async def test_overlapping_submissions_last_to_finish_wins(screen, mock_pipeline):
    """No in-flight guard: a slow first submit overwrites a fast second one."""
    gate = asyncio.Event()
    calls = 0

    async def submit(reviews):
        nonlocal calls
        calls += 1
        if calls == 1:
            await gate.wait()
            return "first"
        return "second"

    mock_pipeline.submit.side_effect = submit
    screen.submit()
    await asyncio.sleep(0)
    second = screen.submit()
    assert second is not None
    await second
    assert screen.status == "second"
    gate.set()
    await screen.wait_idle()
    assert screen.status == "first"


@pytest.mark.asyncio
async def test_dry_run_pipeline_status(mock_catalog, catalog_entries):
    s = ReviewScreen(mock_catalog, DryRunSubmissionPipeline())
    s.mount()
    await s.wait_idle()
    s.submit()
    await s.wait_idle()
    assert s.status == (
        f"Would submit {len(catalog_entries)} reviews (no persistence backend configured)"
    )
