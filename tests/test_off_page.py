"""Tests for concurrent same-site / off-site validation."""

from __future__ import annotations

import asyncio

import pytest

from hrefcheck.errors import LinkNavigationError
from hrefcheck.links.off_page import OffPageValidator
from hrefcheck.models import CheckOptions, LinkCategory, Policy, PolicyLevel, Severity
from tests._fixtures.fake_browser import FakePageSpec, FakeSession


def _validator(session: FakeSession, **overrides) -> OffPageValidator:
    options = CheckOptions(**overrides).validated()
    return OffPageValidator(session, LinkCategory.OFF_SITE, options)


class TestOutcomes:
    async def test_existing_page(self) -> None:
        session = FakeSession({"https://a.test/": FakePageSpec(status=200)})
        [entry] = await _validator(session).validate({"https://a.test/": 1})

        assert entry.outcome.page_exists is True
        assert entry.outcome.status_code == 200
        assert entry.outcome.fragment_exists is None
        assert entry.severity is Severity.OK

    async def test_missing_page_keeps_status(self) -> None:
        session = FakeSession({"https://a.test/": FakePageSpec(status=500)})
        [entry] = await _validator(session).validate({"https://a.test/": 1})

        assert entry.outcome.page_exists is False
        assert entry.outcome.status_code == 500
        assert entry.severity is Severity.FAIL

    async def test_no_response_counts_as_existing(self) -> None:
        session = FakeSession({"https://a.test/": FakePageSpec(no_response=True)})
        [entry] = await _validator(session).validate({"https://a.test/": 1})

        assert entry.outcome.page_exists is True
        assert entry.outcome.status_code is None

    async def test_navigation_error_is_captured(self) -> None:
        session = FakeSession({"https://a.test/": FakePageSpec(error="Timeout 20000ms exceeded")})
        [entry] = await _validator(session).validate({"https://a.test/": 1})

        assert isinstance(entry.outcome.error, LinkNavigationError)
        assert entry.outcome.error.url == "https://a.test/"
        assert entry.outcome.page_exists is None
        assert entry.outcome.fragment_exists is None
        assert entry.severity is Severity.ERR

    async def test_error_is_err_even_when_category_ignored(self) -> None:
        session = FakeSession({"https://a.test/": FakePageSpec(error="net::ERR_CERT_INVALID")})
        validator = _validator(session, policy=Policy(off_site=PolicyLevel.IGNORE))
        [entry] = await validator.validate({"https://a.test/": 1})

        assert entry.severity is Severity.ERR

    async def test_fragment_matches_id_or_name(self) -> None:
        session = FakeSession({"https://a.test/p": FakePageSpec(ids={"by-id"}, names={"by-name"})})
        entries = await _validator(session).validate({
            "https://a.test/p#by-id": 1,
            "https://a.test/p#by-name": 1,
            "https://a.test/p#nothing": 1,
        })

        assert [e.outcome.fragment_exists for e in entries] == [True, True, False]
        assert all(match_name for _, match_name in session.fragment_queries)

    async def test_fragment_not_checked_for_missing_page(self) -> None:
        session = FakeSession({"https://a.test/p": FakePageSpec(status=404)})
        [entry] = await _validator(session).validate({"https://a.test/p#x": 1})

        assert entry.outcome.page_exists is False
        assert entry.outcome.fragment_exists is None
        assert session.fragment_queries == []

    async def test_fragment_checking_disabled(self) -> None:
        session = FakeSession({"https://a.test/p": FakePageSpec(ids={"x"})})
        [entry] = await _validator(session, check_fragments=False).validate({"https://a.test/p#x": 1})

        assert entry.outcome.page_exists is True
        assert entry.outcome.fragment_exists is None
        assert session.fragment_queries == []

    async def test_fragment_query_error_counts_as_missing(self) -> None:
        session = FakeSession({"https://a.test/p": FakePageSpec(broken_tokens={"9"})})
        [entry] = await _validator(session).validate({"https://a.test/p#9": 1})

        assert entry.outcome.error is None
        assert entry.outcome.fragment_exists is False
        assert entry.severity is Severity.WARN

    def test_rejects_same_page_category(self) -> None:
        with pytest.raises(ValueError):
            OffPageValidator(FakeSession({}), LinkCategory.SAME_PAGE, CheckOptions())


class TestFanOut:
    async def test_each_unique_target_navigated_once(self) -> None:
        session = FakeSession({"https://x.test/y": FakePageSpec()})
        validator = OffPageValidator(session, LinkCategory.SAME_SITE, CheckOptions().validated())

        [entry] = await validator.validate({"https://x.test/y": 2})

        assert session.navigations == ["https://x.test/y"]
        assert entry.count == 2
        assert entry.category is LinkCategory.SAME_SITE

    async def test_results_in_first_occurrence_order_not_completion_order(self) -> None:
        pages = {f"https://a.test/{i}": FakePageSpec(delay=0.05 - i * 0.01) for i in range(5)}
        session = FakeSession(pages)
        targets = {url: 1 for url in pages}

        entries = await _validator(session).validate(targets)

        assert [e.target for e in entries] == list(targets)

    async def test_one_failure_does_not_affect_siblings(self) -> None:
        session = FakeSession({
            "https://ok.test/": FakePageSpec(delay=0.02),
            "https://down.test/": FakePageSpec(error="net::ERR_NAME_NOT_RESOLVED"),
            "https://also-ok.test/": FakePageSpec(status=204),
        })
        entries = await _validator(session).validate({
            "https://ok.test/": 1,
            "https://down.test/": 1,
            "https://also-ok.test/": 1,
        })

        assert [e.severity for e in entries] == [Severity.OK, Severity.ERR, Severity.OK]
        assert entries[0].outcome.page_exists is True
        assert entries[2].outcome.status_code == 204

    @pytest.mark.parametrize("limit", [1, 3, 5])
    async def test_never_exceeds_concurrency_limit(self, limit: int) -> None:
        pages = {f"https://a.test/{i}": FakePageSpec(delay=0.01) for i in range(12)}
        session = FakeSession(pages)

        entries = await _validator(session, concurrency_limit=limit).validate({url: 1 for url in pages})

        assert len(entries) == 12
        assert session.max_open_contexts == limit
        assert session.contexts_opened == session.contexts_closed == 12
        assert session.open_contexts == 0

    async def test_empty_targets(self) -> None:
        session = FakeSession({})
        assert await _validator(session).validate({}) == []
        assert session.contexts_opened == 0

    async def test_cancellation_closes_all_contexts(self) -> None:
        pages = {f"https://slow.test/{i}": FakePageSpec(delay=5) for i in range(6)}
        session = FakeSession(pages)
        validator = _validator(session, concurrency_limit=4)

        task = asyncio.ensure_future(validator.validate({url: 1 for url in pages}))
        await asyncio.sleep(0.05)
        assert session.open_contexts == 4

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert session.open_contexts == 0
        assert session.contexts_opened == session.contexts_closed

    async def test_unexpected_error_cancels_siblings(self) -> None:
        class ExplodingSession(FakeSession):
            async def navigate(self, page, url, *, timeout_ms, wait_until):
                if url == "https://boom.test/":
                    raise RuntimeError("browser crashed")
                return await super().navigate(page, url, timeout_ms=timeout_ms, wait_until=wait_until)

        session = ExplodingSession({"https://slow.test/": FakePageSpec(delay=5)})
        validator = _validator(session)

        with pytest.raises(RuntimeError, match="browser crashed"):
            await validator.validate({"https://slow.test/": 1, "https://boom.test/": 1})

        assert session.open_contexts == 0
