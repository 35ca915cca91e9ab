"""Validation of fragment links against the already-loaded seed page."""

from __future__ import annotations

from typing import AsyncIterator, Mapping

from playwright.async_api import Page

from hrefcheck.browser import BrowserSession
from hrefcheck.links.fragments import fragment_exists
from hrefcheck.links.severity import classify
from hrefcheck.logging import get_logger
from hrefcheck.models import CheckOptions, LinkCategory, ResultEntry, ValidationOutcome

logger = get_logger("links.same_page")


async def check_same_page_links(
    session: BrowserSession,
    page: Page,
    targets: Mapping[str, int],
    options: CheckOptions,
) -> AsyncIterator[ResultEntry]:
    """Yield one entry per unique fragment token in *targets*.

    Tokens are looked up by ``id`` on *page*, one after the other.  The bare
    ``#`` fragment is skipped.  The page itself always exists here; with
    fragment checking disabled no lookup is made and ``fragment_exists``
    stays unset.
    """
    for target, count in targets.items():
        token = target[1:] if target.startswith("#") else target
        if not token:
            continue

        exists: bool | None = None
        if options.check_fragments:
            exists = await fragment_exists(session, page, token)
            logger.debug("Same-page fragment %r: %s", target, "found" if exists else "missing")

        outcome = ValidationOutcome(page_exists=True, fragment_exists=exists)
        yield ResultEntry(
            category=LinkCategory.SAME_PAGE,
            target=target,
            count=count,
            outcome=outcome,
            severity=classify(outcome, LinkCategory.SAME_PAGE, options.policy),
        )
