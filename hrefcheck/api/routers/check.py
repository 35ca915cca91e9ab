"""Link-check endpoint with Server-Sent Events (SSE) streaming.

Routes
------
POST /check    Body: {"url": "...", "same_page": "err", ..., "concurrency": 5}

Each validated link is emitted as its own SSE event as soon as the engine
releases it, so clients can render results while off-page categories are
still being checked.  A final ``done`` event carries the severity summary.

SSE event format
----------------
Each event is a JSON-encoded object on the ``data:`` line::

    data: {"event": "result", "category": "same-site", "target": "...", ...}

    data: {"event": "done", "summary": {"ok": 3, "warn": 0, "fail": 1, "err": 0}, "failed": true}

    data: {"event": "error", "detail": "..."}

A client disconnect closes the run: outstanding browser contexts and the
browser are shut down.
"""

from __future__ import annotations

import json
from contextlib import aclosing
from typing import Any, AsyncIterator, Literal

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field

from hrefcheck.config import settings
from hrefcheck.errors import HrefCheckError, InvalidOptionError
from hrefcheck.links import check_links, is_failure
from hrefcheck.links.stream import SessionFactory, validate_seed_url
from hrefcheck.logging import get_logger
from hrefcheck.models import CheckOptions, Policy, PolicyLevel, Severity

router = APIRouter()
logger = get_logger("api.check")

PolicyChoice = Literal["err", "warn", "ignore", "off"]


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class CheckRequest(BaseModel):
    url: str
    same_page: PolicyChoice = "err"
    same_site: PolicyChoice = "err"
    off_site: PolicyChoice = "err"
    fragments: PolicyChoice = "warn"
    timeout: float = Field(default_factory=lambda: settings.navigation_timeout, description="Seconds.")
    wait_until: str = Field(default_factory=lambda: settings.wait_until)
    concurrency: int = Field(default_factory=lambda: settings.concurrency)

    def to_options(self) -> CheckOptions:
        """Build validated :class:`CheckOptions`; ``off`` disables a check."""
        def level(choice: str) -> PolicyLevel:
            return PolicyLevel.IGNORE if choice == "off" else PolicyLevel(choice)

        options = CheckOptions(
            check_same_page=self.same_page != "off",
            check_same_site=self.same_site != "off",
            check_off_site=self.off_site != "off",
            check_fragments=self.fragments != "off",
            navigation_timeout_ms=int(self.timeout * 1000),
            wait_until=self.wait_until,
            concurrency_limit=self.concurrency,
            policy=Policy(
                same_page=level(self.same_page),
                same_site=level(self.same_site),
                off_site=level(self.off_site),
                fragments=level(self.fragments),
            ),
        )
        return options.validated()


# ---------------------------------------------------------------------------
# SSE helpers
# ---------------------------------------------------------------------------

def _sse(payload: dict[str, Any]) -> str:
    """Format a payload dict as a single SSE ``data:`` line."""
    return f"data: {json.dumps(payload)}\n\n"


async def _check_sse_generator(
    url: str,
    options: CheckOptions,
    session_factory: SessionFactory | None,
) -> AsyncIterator[str]:
    """Yield SSE-formatted strings for the duration of one link-check run."""
    summary = {severity.label: 0 for severity in Severity}
    failed = False
    try:
        async with aclosing(check_links(url, options, session_factory=session_factory)) as results:
            async for entry in results:
                summary[entry.severity.label] += 1
                failed = failed or is_failure(entry.severity)
                yield _sse({"event": "result", **entry.to_dict()})
    except HrefCheckError as exc:
        logger.info("Link check of %s aborted: %s", url, exc)
        yield _sse({"event": "error", "detail": str(exc)})
        return

    yield _sse({"event": "done", "summary": summary, "failed": failed})


# ---------------------------------------------------------------------------
# Route
# ---------------------------------------------------------------------------

@router.post("")
async def check(body: CheckRequest, request: Request) -> StreamingResponse:
    """Check every link on ``body.url`` and stream results as SSE.

    Invalid options are rejected with 422 before any browser is launched.
    """
    try:
        url = validate_seed_url(body.url)
        options = body.to_options()
    except InvalidOptionError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return StreamingResponse(
        _check_sse_generator(url, options, request.app.state.session_factory),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",   # disable nginx proxy buffering
        },
    )
