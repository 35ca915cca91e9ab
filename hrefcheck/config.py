"""Centralised settings for hrefcheck.

All runtime defaults are resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).  Explicit arguments to
:func:`hrefcheck.check_links`, the CLI and the API always win over these.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() not in {"0", "false", "no", "off", ""}


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    navigation_timeout: float = field(
        default_factory=lambda: float(os.environ.get("HREFCHECK_TIMEOUT", "20.0"))
    )
    wait_until: str = field(
        default_factory=lambda: os.environ.get("HREFCHECK_WAIT_UNTIL", "load")
    )
    concurrency: int = field(
        default_factory=lambda: int(os.environ.get("HREFCHECK_CONCURRENCY", "5"))
    )

    @property
    def navigation_timeout_ms(self) -> int:
        """Navigation timeout in milliseconds, as Playwright expects it."""
        return int(self.navigation_timeout * 1000)

    # ------------------------------------------------------------------
    # Browser
    # ------------------------------------------------------------------
    browser: str = field(
        default_factory=lambda: os.environ.get("HREFCHECK_BROWSER", "chromium")
    )
    headless: bool = field(
        default_factory=lambda: _env_flag("HREFCHECK_HEADLESS", "1")
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("HREFCHECK_LOG_LEVEL", "WARNING")
    )

    # ------------------------------------------------------------------
    # HTTP API
    # ------------------------------------------------------------------
    api_host: str = field(
        default_factory=lambda: os.environ.get("HREFCHECK_API_HOST", "127.0.0.1")
    )
    api_port: int = field(
        default_factory=lambda: int(os.environ.get("HREFCHECK_API_PORT", "8000"))
    )


# Module-level singleton, import this everywhere:
#   from hrefcheck.config import settings
settings = Settings()
