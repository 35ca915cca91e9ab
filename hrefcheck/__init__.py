"""hrefcheck: validate the hyperlinks found on a web page.

Typical use::

    from contextlib import aclosing
    from hrefcheck import CheckOptions, check_links

    async with aclosing(check_links("https://example.com/", CheckOptions())) as results:
        async for entry in results:
            print(entry.category.value, entry.target, entry.severity.label)
"""

from hrefcheck.errors import (
    FragmentQueryError,
    HrefCheckError,
    InvalidOptionError,
    LinkNavigationError,
    NavigationError,
    SeedNavigationError,
)
from hrefcheck.links import check_links, classify, count_targets, is_failure, summarize
from hrefcheck.models import (
    CheckOptions,
    LinkCategory,
    Policy,
    PolicyLevel,
    ResultEntry,
    Severity,
    ValidationOutcome,
    WaitUntil,
)

__version__ = "0.1.0"

__all__ = [
    "check_links",
    "classify",
    "count_targets",
    "is_failure",
    "summarize",
    "CheckOptions",
    "LinkCategory",
    "Policy",
    "PolicyLevel",
    "ResultEntry",
    "Severity",
    "ValidationOutcome",
    "WaitUntil",
    "HrefCheckError",
    "InvalidOptionError",
    "NavigationError",
    "SeedNavigationError",
    "LinkNavigationError",
    "FragmentQueryError",
    "__version__",
]
