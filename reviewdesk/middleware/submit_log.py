"""Submit audit trail: one JSONL record per review submission request.

Each record names the session and whether its submission was accepted for
background processing (202) or turned away. The write itself finishes
later and reports on the session's status line, so it is not recorded here.
"""

import json
import logging
import re
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from reviewdesk.config import settings

logger = logging.getLogger(__name__)

LOG_DIR = Path(settings.log_dir)
LOG_FILE = LOG_DIR / "submit_log.jsonl"

SUBMIT_PATH = re.compile(r"^/review/sessions/(?P<session_id>[^/]+)/submit$")

_OUTCOMES = {
    202: "accepted",
    404: "unknown_session",
    409: "nothing_to_submit",
    503: "no_pipeline",
}


def submit_session_id(request: Request) -> str | None:
    """Session id of a submit request, None for any other request."""
    if request.method != "POST":
        return None
    match = SUBMIT_PATH.match(request.url.path)
    return match.group("session_id") if match else None


def submit_outcome(status_code: int) -> str:
    return _OUTCOMES.get(status_code, "error")


def append_submit_record(record: dict[str, Any]) -> None:
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    with open(LOG_FILE, "a", encoding="utf-8") as f:
        f.write(json.dumps(record) + "\n")


class SubmitLogMiddleware(BaseHTTPMiddleware):
    """Records every submit request's session, outcome and latency."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        session_id = submit_session_id(request)
        if session_id is None:
            response: Response = await call_next(request)
            return response

        started = time.monotonic()
        response = await call_next(request)
        outcome = submit_outcome(response.status_code)
        logger.info(
            "Submit for session %s: %s (%d)", session_id, outcome, response.status_code
        )

        record = {
            "requested_at": datetime.now(timezone.utc).isoformat(),
            "session_id": session_id,
            "outcome": outcome,
            "status_code": response.status_code,
            "elapsed_ms": round((time.monotonic() - started) * 1000, 1),
        }
        try:
            append_submit_record(record)
        except OSError as e:
            logger.warning("Could not record submit for session %s: %s", session_id, e)

        return response
