"""Exception hierarchy for hrefcheck.

Only :class:`InvalidOptionError` and :class:`SeedNavigationError` end a run.
:class:`LinkNavigationError` is captured into a result entry and
:class:`FragmentQueryError` never leaves the validators.
"""

from __future__ import annotations


class HrefCheckError(Exception):
    """Base class for all hrefcheck errors."""


class InvalidOptionError(HrefCheckError, ValueError):
    """Raised when run options are rejected before any browser is launched."""


class NavigationError(HrefCheckError):
    """A browser navigation to *url* threw (timeout, DNS, TLS, ...)."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to navigate to {url}: {reason}" if reason else f"Failed to navigate to {url}")
        self.url = url
        self.reason = reason


class SeedNavigationError(NavigationError):
    """The seed page could not be loaded; the whole run is aborted."""


class LinkNavigationError(NavigationError):
    """Navigation to a single same-site or off-site target failed."""


class FragmentQueryError(HrefCheckError):
    """Looking up a fragment anchor on a page failed (e.g. invalid selector)."""

    def __init__(self, token: str, reason: str) -> None:
        super().__init__(f"Fragment query for {token!r} failed: {reason}")
        self.token = token
        self.reason = reason
