"""Utilities for rendering link-check results in the CLI."""

from __future__ import annotations

import json
from typing import Literal

from hrefcheck.models import ResultEntry, Severity

OutputFormat = Literal["pretty", "json"]

_EMOJI = {
    Severity.OK: "✅",
    Severity.WARN: "🚧",
    Severity.FAIL: "❌",
    Severity.ERR: "🚨",
}


def severity_label(severity: Severity, emoji: bool = False) -> str:
    """Return the display label for *severity*."""
    return _EMOJI[severity] if emoji else severity.label


def format_entry(
    entry: ResultEntry,
    fmt: OutputFormat = "pretty",
    *,
    emoji: bool = True,
    silent: bool = False,
) -> str | None:
    """Render one result entry as a single line.

    Args:
        entry: The entry to render.
        fmt: ``pretty`` for a tab-separated line, ``json`` for one JSON
            object per line (emoji never used).
        emoji: Use emoji instead of the severity word (pretty only).
        silent: Return ``None`` for ``ok`` entries.

    Returns:
        The rendered line, or ``None`` when the entry is suppressed.
    """
    if silent and entry.severity is Severity.OK:
        return None

    if fmt == "json":
        data = entry.to_dict()
        data["summary"] = severity_label(entry.severity)
        return json.dumps(data)

    outcome = entry.outcome
    label = severity_label(entry.severity, emoji)

    # Status codes are only interesting for pages that do not exist.
    status = ""
    if outcome.error is None and outcome.page_exists is False and outcome.status_code:
        status = f" {{{outcome.status_code}}}"

    text = f"[{entry.category.value}]\t{label}\t{entry.target} [x{entry.count}]{status}"
    if outcome.error is not None:
        text += f" ({outcome.error})"
    return text


def format_summary(summary: dict[str, int]) -> str:
    """Render a ``{label: count}`` summary as ``ok=3 warn=0 fail=1 err=0``."""
    return " ".join(f"{label}={count}" for label, count in summary.items())
