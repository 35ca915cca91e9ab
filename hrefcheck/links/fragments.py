"""Fragment lookups with the validators' lossy error contract."""

from __future__ import annotations

from playwright.async_api import Page

from hrefcheck.browser import BrowserSession
from hrefcheck.errors import FragmentQueryError
from hrefcheck.logging import get_logger

logger = get_logger("links.fragments")


async def fragment_exists(session: BrowserSession, page: Page, token: str, *, match_name: bool = False) -> bool:
    """Return whether *token* names an element on *page*.

    A failed query is reported as "not found": a malformed token must not
    abort the category it belongs to.
    """
    try:
        return await session.element_exists(page, token, match_name=match_name)
    except FragmentQueryError as exc:
        logger.debug("Treating fragment %r as missing: %s", token, exc.reason)
        return False
