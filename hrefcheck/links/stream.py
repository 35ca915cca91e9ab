"""The public entry point: an ordered, cancellable stream of result entries."""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import AsyncIterator, Callable
from urllib.parse import urlsplit

from playwright.async_api import Page

from hrefcheck.browser import BrowserSession
from hrefcheck.errors import InvalidOptionError, NavigationError, SeedNavigationError
from hrefcheck.links.counter import count_targets
from hrefcheck.links.off_page import OffPageValidator
from hrefcheck.links.same_page import check_same_page_links
from hrefcheck.logging import get_logger
from hrefcheck.models import CheckOptions, LinkCategory, ResultEntry, WaitUntil

logger = get_logger("links.stream")

SessionFactory = Callable[[], AbstractAsyncContextManager[BrowserSession]]

_OFF_PAGE_CATEGORIES = (LinkCategory.SAME_SITE, LinkCategory.OFF_SITE)


def validate_seed_url(seed_url: str) -> str:
    """Return *seed_url* if it is an absolute http(s) URL, else raise :class:`InvalidOptionError`."""
    parts = urlsplit(str(seed_url))
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise InvalidOptionError(f"Seed URL must be an absolute http(s) URL, got {seed_url!r}")
    return str(seed_url)


async def _load_seed(session: BrowserSession, page: Page, url: str, options: CheckOptions) -> None:
    """Navigate *page* to the seed URL; a missing or non-ok response is fatal."""
    try:
        result = await session.navigate(
            page,
            url,
            timeout_ms=options.navigation_timeout_ms,
            wait_until=WaitUntil(options.wait_until),
        )
    except NavigationError as exc:
        raise SeedNavigationError(url, exc.reason) from exc

    if not result.responded:
        raise SeedNavigationError(url, "no response")
    if not result.ok:
        raise SeedNavigationError(url, f"HTTP {result.status_code}")


async def collect_links(
    session: BrowserSession,
    page: Page,
    options: CheckOptions,
) -> dict[LinkCategory, dict[str, int]]:
    """Extract and count the targets of every enabled category on *page*.

    Disabled categories map to an empty set and are not extracted at all.
    """
    links: dict[LinkCategory, dict[str, int]] = {}
    for category in LinkCategory:
        if options.is_enabled(category):
            links[category] = count_targets(await session.extract_links(page, category))
        else:
            links[category] = {}
        logger.info("Found %d unique %s link(s)", len(links[category]), category.value)
    return links


async def check_links(
    seed_url: str,
    options: CheckOptions | None = None,
    *,
    session_factory: SessionFactory | None = None,
) -> AsyncIterator[ResultEntry]:
    """Load *seed_url* and yield a :class:`ResultEntry` for every unique link on it.

    Entries come out in a fixed category order (same-page, same-site,
    off-site) and, within a category, in the order each target first
    appears on the page.  Same-site and off-site entries are released a
    whole category at a time, once every target of that category is done.

    Options and the seed URL are validated before any browser is launched.
    The seed page's context is closed before off-page checks start.  One
    browser is used for the run and is closed on every exit path,
    including when the caller stops iterating early.  To stop early, close
    the generator (``aclose()``), e.g. by iterating inside
    ``contextlib.aclosing``.

    Raises:
        InvalidOptionError: If *options* or *seed_url* are rejected.
        SeedNavigationError: If the seed page cannot be loaded.  No entry
            is yielded in that case.
    """
    opts = (options or CheckOptions()).validated()
    url = validate_seed_url(seed_url)
    factory = session_factory or BrowserSession.launch

    logger.info("Checking links on %s", url)
    async with factory() as session:
        async with session.new_page() as page:
            await _load_seed(session, page, url, opts)
            links = await collect_links(session, page, opts)

            async for entry in check_same_page_links(session, page, links[LinkCategory.SAME_PAGE], opts):
                yield entry

        # The seed context is closed before off-page checks open their own.
        for category in _OFF_PAGE_CATEGORIES:
            validator = OffPageValidator(session, category, opts)
            for entry in await validator.validate(links[category]):
                yield entry

    logger.info("Finished checking %s", url)
