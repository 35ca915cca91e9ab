"""Policy-driven severity classification of validation outcomes."""

from __future__ import annotations

from typing import Iterable

from hrefcheck.models import (
    LinkCategory,
    Policy,
    PolicyLevel,
    ResultEntry,
    Severity,
    ValidationOutcome,
)


def classify(outcome: ValidationOutcome, category: LinkCategory, policy: Policy) -> Severity:
    """Map *outcome* to a :class:`Severity` under *policy*.

    A captured error is always ``ERR`` whatever the policy.  At each
    remaining tier a missing page is considered before a missing fragment.
    """
    if outcome.error is not None:
        return Severity.ERR

    page_missing = outcome.page_exists is False
    fragment_missing = outcome.fragment_exists is False
    page_level = policy.for_category(category)

    if page_missing and page_level is PolicyLevel.ERR:
        return Severity.FAIL
    if fragment_missing and policy.fragments is PolicyLevel.ERR:
        return Severity.FAIL
    if page_missing and page_level is PolicyLevel.WARN:
        return Severity.WARN
    if fragment_missing and policy.fragments is PolicyLevel.WARN:
        return Severity.WARN
    return Severity.OK


def is_failure(severity: Severity) -> bool:
    """``fail`` and ``err`` entries should fail the run as a whole."""
    return severity >= Severity.FAIL


def summarize(entries: Iterable[ResultEntry]) -> dict[str, int]:
    """Count *entries* per severity label (all labels present, possibly 0)."""
    summary = {severity.label: 0 for severity in Severity}
    for entry in entries:
        summary[entry.severity.label] += 1
    return summary
