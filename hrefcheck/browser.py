"""Playwright plumbing used by the link checker.

A :class:`BrowserSession` owns one launched browser for the lifetime of a
run.  Every page it hands out lives in its own isolated browser context which
is closed when the ``new_page()`` block exits, whatever the outcome.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator

from playwright.async_api import Browser, Page, async_playwright
from playwright.async_api import Error as PlaywrightError

from hrefcheck.config import settings
from hrefcheck.errors import FragmentQueryError, NavigationError
from hrefcheck.logging import get_logger
from hrefcheck.models import LinkCategory, WaitUntil

logger = get_logger("browser")

# ---------------------------------------------------------------------------
# Link extraction scripts (evaluated in the page against matching anchors)
# ---------------------------------------------------------------------------
_LINK_QUERIES: dict[LinkCategory, tuple[str, str]] = {
    LinkCategory.SAME_PAGE: (
        "a[href^='#']",
        "elems => elems.map(a => a.hash)",
    ),
    LinkCategory.SAME_SITE: (
        "a[href]:not([href^='#'])",
        "elems => elems.filter(a => a.origin === location.origin).map(a => a.href)",
    ),
    LinkCategory.OFF_SITE: (
        "a[href]",
        "elems => elems"
        ".filter(a => /^https?:$/.test(a.protocol) && a.origin !== location.origin)"
        ".map(a => a.href)",
    ),
}


@dataclass
class NavigationResult:
    """The main-document response of a completed navigation."""

    ok: bool
    status_code: int | None = None

    @property
    def responded(self) -> bool:
        """False when the navigation finished without a main-document response."""
        return self.status_code is not None


def css_string(value: str) -> str:
    """Quote *value* as a CSS string literal for use in an attribute selector."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\a ")
    return f'"{escaped}"'


def fragment_selector(token: str, *, match_name: bool = False) -> str:
    """Return a selector matching an element whose ``id`` (or ``name``) is *token*."""
    selector = f"[id={css_string(token)}]"
    if match_name:
        selector += f", [name={css_string(token)}]"
    return selector


class BrowserSession:
    """A launched browser shared by every validation task of one run.

    The browser itself is only used to create new contexts; a context is
    never shared between tasks.
    """

    def __init__(self, browser: Browser) -> None:
        self._browser = browser
        self._closed = False

    @classmethod
    @asynccontextmanager
    async def launch(
        cls,
        browser_name: str | None = None,
        headless: bool | None = None,
    ) -> AsyncIterator[BrowserSession]:
        """Start Playwright, launch a browser and yield a session around it.

        The browser is closed and Playwright stopped on every exit path.
        """
        name = browser_name or settings.browser
        if name not in ("chromium", "firefox", "webkit"):
            raise ValueError(f"Unknown browser {name!r}. Use: chromium | firefox | webkit")

        if headless is None:
            headless = settings.headless

        async with async_playwright() as pw:
            logger.info("Launching %s (headless=%s)", name, headless)
            browser = await getattr(pw, name).launch(headless=headless)
            session = cls(browser)
            try:
                yield session
            finally:
                await session.close()

    async def close(self) -> None:
        """Close the browser.  Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        await self._browser.close()
        logger.info("Browser closed")

    @asynccontextmanager
    async def new_page(self) -> AsyncIterator[Page]:
        """Yield a page inside a fresh, isolated browser context."""
        context = await self._browser.new_context()
        try:
            yield await context.new_page()
        finally:
            try:
                await context.close()
            except PlaywrightError as exc:
                # The browser may already be gone during teardown.
                logger.debug("Closing browser context failed: %s", exc)

    async def navigate(
        self,
        page: Page,
        url: str,
        *,
        timeout_ms: int,
        wait_until: WaitUntil,
    ) -> NavigationResult:
        """Navigate *page* to *url*.

        Raises:
            NavigationError: If Playwright throws while navigating.
        """
        try:
            response = await page.goto(
                url,
                timeout=timeout_ms,
                wait_until=wait_until.playwright_value,
            )
        except PlaywrightError as exc:
            raise NavigationError(url, exc.message) from exc

        # No response (e.g. same-document navigation) but no error: treat as loaded.
        if response is None:
            return NavigationResult(ok=True)
        return NavigationResult(ok=response.ok, status_code=response.status)

    async def extract_links(self, page: Page, category: LinkCategory) -> list[str]:
        """Return the raw targets of *category* on *page*, in document order."""
        selector, script = _LINK_QUERIES[category]
        return await page.eval_on_selector_all(selector, script)

    async def element_exists(self, page: Page, token: str, *, match_name: bool = False) -> bool:
        """Return whether *page* has an element whose id (or name) is *token*.

        Raises:
            FragmentQueryError: If the query itself fails.
        """
        try:
            handle = await page.query_selector(fragment_selector(token, match_name=match_name))
        except PlaywrightError as exc:
            raise FragmentQueryError(token, exc.message) from exc
        return handle is not None
