"""Link-validation engine: counting, validation and streaming of results."""

from hrefcheck.links.counter import count_targets
from hrefcheck.links.off_page import OffPageValidator
from hrefcheck.links.same_page import check_same_page_links
from hrefcheck.links.severity import classify, is_failure, summarize
from hrefcheck.links.stream import check_links, collect_links

__all__ = [
    "check_links",
    "collect_links",
    "count_targets",
    "check_same_page_links",
    "OffPageValidator",
    "classify",
    "is_failure",
    "summarize",
]
