"""Data models for the link-checking pipeline.

These are plain dataclasses and enums.  Outcomes and entries are frozen: an
entry is never revised once a validator has produced it.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum, IntEnum
from typing import Any

from hrefcheck.config import settings
from hrefcheck.errors import InvalidOptionError


class LinkCategory(str, Enum):
    """Where a link on the seed page points to."""

    SAME_PAGE = "same-page"
    SAME_SITE = "same-site"
    OFF_SITE = "off-site"


class WaitUntil(str, Enum):
    """When a navigation is considered finished."""

    LOAD = "load"
    DOM_CONTENT_LOADED = "domcontentloaded"
    NETWORK_IDLE_0 = "networkidle0"
    NETWORK_IDLE_2 = "networkidle2"

    @property
    def playwright_value(self) -> str:
        """The equivalent ``wait_until`` argument for ``Page.goto``."""
        # Playwright has a single "networkidle" state (no connections for 500 ms).
        if self in (WaitUntil.NETWORK_IDLE_0, WaitUntil.NETWORK_IDLE_2):
            return "networkidle"
        return self.value


class PolicyLevel(str, Enum):
    """How a failed existence check is scored."""

    IGNORE = "ignore"
    WARN = "warn"
    ERR = "err"


class Severity(IntEnum):
    """Final classification of a result entry, ordered ok < warn < fail < err."""

    OK = 0
    WARN = 1
    FAIL = 2
    ERR = 3

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class Policy:
    """Per-category policy, plus the virtual ``fragments`` category."""

    same_page: PolicyLevel = PolicyLevel.ERR
    same_site: PolicyLevel = PolicyLevel.ERR
    off_site: PolicyLevel = PolicyLevel.ERR
    fragments: PolicyLevel = PolicyLevel.WARN

    def for_category(self, category: LinkCategory) -> PolicyLevel:
        if category is LinkCategory.SAME_PAGE:
            return self.same_page
        if category is LinkCategory.SAME_SITE:
            return self.same_site
        return self.off_site


@dataclass(frozen=True)
class ValidationOutcome:
    """What a validator learned about one unique target.

    Either ``error`` is set (navigation threw) and nothing else is known, or
    ``page_exists`` is a bool.  ``fragment_exists`` is only set for existing
    pages whose URL carried a fragment while fragment checking was enabled.
    """

    page_exists: bool | None = None
    status_code: int | None = None
    fragment_exists: bool | None = None
    error: Exception | None = None

    def __post_init__(self) -> None:
        if self.error is not None:
            if self.page_exists is not None or self.fragment_exists is not None:
                raise ValueError("An errored outcome cannot carry page or fragment results")
            return
        if self.page_exists is None:
            raise ValueError("An outcome without an error must set page_exists")
        if self.fragment_exists is not None and self.page_exists is not True:
            raise ValueError("fragment_exists requires an existing page")

    @classmethod
    def failed(cls, error: Exception) -> ValidationOutcome:
        return cls(error=error)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.error is not None:
            data["error"] = {"name": type(self.error).__name__, "message": str(self.error)}
            return data
        data["page_exists"] = self.page_exists
        if self.status_code is not None:
            data["status_code"] = self.status_code
        if self.fragment_exists is not None:
            data["fragment_exists"] = self.fragment_exists
        return data


@dataclass(frozen=True)
class ResultEntry:
    """One unique target of one category, validated and classified."""

    category: LinkCategory
    target: str
    count: int
    outcome: ValidationOutcome
    severity: Severity = Severity.OK

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category.value,
            "target": self.target,
            "count": self.count,
            "outcome": self.outcome.to_dict(),
            "severity": self.severity.label,
        }


@dataclass
class CheckOptions:
    """Options for a single :func:`hrefcheck.check_links` run."""

    check_same_page: bool = True
    check_same_site: bool = True
    check_off_site: bool = True
    check_fragments: bool = True
    navigation_timeout_ms: int = field(default_factory=lambda: settings.navigation_timeout_ms)
    wait_until: WaitUntil | str = field(default_factory=lambda: settings.wait_until)
    concurrency_limit: int = field(default_factory=lambda: settings.concurrency)
    policy: Policy = field(default_factory=Policy)

    def is_enabled(self, category: LinkCategory) -> bool:
        if category is LinkCategory.SAME_PAGE:
            return self.check_same_page
        if category is LinkCategory.SAME_SITE:
            return self.check_same_site
        return self.check_off_site

    def validated(self) -> CheckOptions:
        """Return a normalised copy, or raise :class:`InvalidOptionError`."""
        try:
            wait_until = WaitUntil(self.wait_until)
        except ValueError:
            choices = ", ".join(w.value for w in WaitUntil)
            raise InvalidOptionError(
                f"Unsupported wait-until condition {self.wait_until!r}. Use one of: {choices}"
            ) from None
        if isinstance(self.concurrency_limit, bool) or not isinstance(self.concurrency_limit, int):
            raise InvalidOptionError(f"concurrency_limit must be an integer, got {self.concurrency_limit!r}")
        if self.concurrency_limit < 1:
            raise InvalidOptionError(f"concurrency_limit must be at least 1, got {self.concurrency_limit}")
        if self.navigation_timeout_ms < 0:
            raise InvalidOptionError(
                f"navigation_timeout_ms cannot be negative, got {self.navigation_timeout_ms}"
            )
        return replace(self, wait_until=wait_until)
