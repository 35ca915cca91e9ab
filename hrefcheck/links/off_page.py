"""Concurrent validation of same-site and off-site targets.

Every unique URL gets its own task, its own browser context and its own
navigation.  An ``asyncio.Semaphore`` gates context creation so that no more
than ``concurrency_limit`` contexts are open at once; waiters are admitted in
FIFO order.  Results are collected and returned in first-occurrence order,
so a category completes only when its slowest target does.

Failed navigations are not retried.
"""

from __future__ import annotations

import asyncio
from typing import Mapping
from urllib.parse import urlsplit

from hrefcheck.browser import BrowserSession
from hrefcheck.errors import LinkNavigationError, NavigationError
from hrefcheck.links.fragments import fragment_exists
from hrefcheck.links.severity import classify
from hrefcheck.logging import get_logger
from hrefcheck.models import CheckOptions, LinkCategory, ResultEntry, ValidationOutcome, WaitUntil

logger = get_logger("links.off_page")


class OffPageValidator:
    """Validates the unique targets of one off-page category."""

    def __init__(self, session: BrowserSession, category: LinkCategory, options: CheckOptions) -> None:
        if category is LinkCategory.SAME_PAGE:
            raise ValueError("OffPageValidator handles same-site and off-site links only")
        self._session = session
        self._category = category
        self._options = options

    @property
    def category(self) -> LinkCategory:
        return self._category

    async def validate(self, targets: Mapping[str, int]) -> list[ResultEntry]:
        """Validate all *targets* concurrently and return their entries in order.

        If this coroutine is cancelled, or a task fails unexpectedly, every
        sibling task is cancelled and awaited before the exception propagates
        so that all of their contexts are closed.
        """
        if not targets:
            return []

        urls = list(targets)
        gate = asyncio.Semaphore(self._options.concurrency_limit)
        logger.info(
            "Checking %d %s link(s) (concurrency=%d)",
            len(urls),
            self._category.value,
            self._options.concurrency_limit,
        )

        tasks = [asyncio.ensure_future(self._check_gated(gate, url)) for url in urls]
        try:
            outcomes = await asyncio.gather(*tasks)
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        policy = self._options.policy
        return [
            ResultEntry(
                category=self._category,
                target=url,
                count=targets[url],
                outcome=outcome,
                severity=classify(outcome, self._category, policy),
            )
            for url, outcome in zip(urls, outcomes)
        ]

    async def _check_gated(self, gate: asyncio.Semaphore, url: str) -> ValidationOutcome:
        async with gate:
            return await self._check(url)

    async def _check(self, url: str) -> ValidationOutcome:
        options = self._options
        wait_until = WaitUntil(options.wait_until)

        async with self._session.new_page() as page:
            try:
                result = await self._session.navigate(
                    page,
                    url,
                    timeout_ms=options.navigation_timeout_ms,
                    wait_until=wait_until,
                )
            except NavigationError as exc:
                logger.info("Navigation to %s failed: %s", url, exc.reason)
                return ValidationOutcome.failed(LinkNavigationError(url, exc.reason))

            if not result.ok:
                logger.debug("%s responded with HTTP %s", url, result.status_code)
                return ValidationOutcome(page_exists=False, status_code=result.status_code)

            exists: bool | None = None
            fragment = urlsplit(url).fragment
            if fragment and options.check_fragments:
                exists = await fragment_exists(self._session, page, fragment, match_name=True)

            logger.debug("%s exists (HTTP %s, fragment=%s)", url, result.status_code, exists)
            return ValidationOutcome(page_exists=True, status_code=result.status_code, fragment_exists=exists)
