"""hrefcheck CLI: entry-point for link checking.

Usage:
    python cli/main.py --help

Commands:
    check     → validate every link on a page and print one line per link
    serve     → run the HTTP API (SSE streaming) under uvicorn
    version   → print the package version
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from hrefcheck.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any working directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import asyncio
from contextlib import aclosing

import typer

from cli.rendering import format_entry, format_summary
from hrefcheck import __version__
from hrefcheck.config import settings
from hrefcheck.errors import HrefCheckError, InvalidOptionError
from hrefcheck.links import check_links, is_failure
from hrefcheck.links.stream import validate_seed_url
from hrefcheck.logging import configure_logging, get_logger
from hrefcheck.models import CheckOptions, Policy, PolicyLevel, Severity

logger = get_logger("cli")

app = typer.Typer(
    name="hrefcheck",
    help="Check the same-page, same-site and off-site links of a web page.",
    no_args_is_help=True,
)

_POLICY_HELP = "err | warn | ignore | off"


def _parse_policy(flag: str, value: str) -> tuple[bool, PolicyLevel]:
    """Return ``(enabled, level)`` for a ``--same-page``-style option value."""
    if value == "off":
        return False, PolicyLevel.IGNORE
    try:
        return True, PolicyLevel(value)
    except ValueError:
        raise typer.BadParameter(f"{value!r} is not one of: {_POLICY_HELP}", param_hint=flag) from None


def _build_options(
    same_page: str,
    same_site: str,
    off_site: str,
    fragments: str,
    concurrency: int,
    timeout: float,
    wait_until: str,
) -> CheckOptions:
    check_same_page, same_page_level = _parse_policy("--same-page", same_page)
    check_same_site, same_site_level = _parse_policy("--same-site", same_site)
    check_off_site, off_site_level = _parse_policy("--off-site", off_site)
    check_fragments, fragments_level = _parse_policy("--fragments", fragments)

    return CheckOptions(
        check_same_page=check_same_page,
        check_same_site=check_same_site,
        check_off_site=check_off_site,
        check_fragments=check_fragments,
        navigation_timeout_ms=int(timeout * 1000),
        wait_until=wait_until,
        concurrency_limit=concurrency,
        policy=Policy(
            same_page=same_page_level,
            same_site=same_site_level,
            off_site=off_site_level,
            fragments=fragments_level,
        ),
    ).validated()


async def _run(url: str, options: CheckOptions, fmt: str, emoji: bool, silent: bool) -> dict[str, int]:
    """Print each entry as it arrives and return the severity summary."""
    summary = {severity.label: 0 for severity in Severity}
    async with aclosing(check_links(url, options)) as results:
        async for entry in results:
            summary[entry.severity.label] += 1
            line = format_entry(entry, fmt, emoji=emoji, silent=silent)  # type: ignore[arg-type]
            if line:
                typer.echo(line)
    return summary


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------
@app.command("check")
def check(
    url: str = typer.Argument(..., help="URL of the page whose links are checked."),
    same_page: str = typer.Option("err", "--same-page", help=f"Same-page (fragment) links: {_POLICY_HELP}."),
    same_site: str = typer.Option("err", "--same-site", help=f"Same-site links: {_POLICY_HELP}."),
    off_site: str = typer.Option("err", "--off-site", help=f"External links: {_POLICY_HELP}."),
    fragments: str = typer.Option(
        "warn", "--fragments", help=f"Existence of IDs corresponding to fragments: {_POLICY_HELP}."
    ),
    concurrency: int = typer.Option(
        settings.concurrency, "--concurrency", "-c", help="How many links to check at a time."
    ),
    timeout: float = typer.Option(
        settings.navigation_timeout, "--timeout", help="Timeout (in seconds) for navigation."
    ),
    wait_until: str = typer.Option(
        settings.wait_until,
        "--wait-until",
        help="Wait until load | domcontentloaded | networkidle0 | networkidle2.",
    ),
    output_format: str = typer.Option("pretty", "--format", help="Format output as pretty or json."),
    silent: bool = typer.Option(False, "--silent", help="Show non-ok results only."),
    emoji: bool = typer.Option(True, "--emoji/--no-emoji", help="Use emoji in output (with --format=pretty)."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Check every link on URL.  Exits with 1 if any link fails or errors."""
    configure_logging(verbose=verbose, level=settings.log_level)

    if output_format not in ("pretty", "json"):
        raise typer.BadParameter(f"{output_format!r} is not one of: pretty | json", param_hint="--format")

    try:
        seed = validate_seed_url(url)
        options = _build_options(same_page, same_site, off_site, fragments, concurrency, timeout, wait_until)
    except InvalidOptionError as exc:
        typer.echo(f"[check] {exc}", err=True)
        raise typer.Exit(2)

    try:
        summary = asyncio.run(
            _run(seed, options, output_format, emoji and output_format == "pretty", silent)
        )
    except HrefCheckError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1)

    logger.info("Summary: %s", format_summary(summary))
    if any(is_failure(severity) and summary[severity.label] for severity in Severity):
        raise typer.Exit(1)


@app.command("serve")
def serve(
    host: str = typer.Option(settings.api_host, help="Interface to bind."),
    port: int = typer.Option(settings.api_port, help="Port to listen on."),
) -> None:
    """Run the HTTP API that streams link-check results as SSE."""
    import uvicorn

    configure_logging(level=settings.log_level)
    typer.echo(f"[serve] Listening on http://{host}:{port}")
    uvicorn.run("hrefcheck.api.app:app", host=host, port=port)


@app.command("version")
def version() -> None:
    """Print the hrefcheck version."""
    typer.echo(__version__)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
