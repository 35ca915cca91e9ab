"""FastAPI application factory.

Each request to ``/check`` runs its own link check with its own browser;
nothing is shared between requests.  ``session_factory`` lets callers (and
tests) replace how that browser is provided.

Routers
-------
    /check     Link check of one seed page (SSE streaming)
    /health    Liveness probe
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hrefcheck import __version__
from hrefcheck.api.routers import check as check_router
from hrefcheck.links.stream import SessionFactory


def create_app(session_factory: SessionFactory | None = None) -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    app = FastAPI(
        title="hrefcheck API",
        description=(
            "Validates the same-page, same-site and off-site links of a web "
            "page and streams the results as Server-Sent Events."
        ),
        version=__version__,
    )
    app.state.session_factory = session_factory

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(check_router.router, prefix="/check", tags=["check"])

    @app.get("/health", tags=["health"])
    def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


# Module-level instance used by uvicorn:
#   uvicorn hrefcheck.api.app:app
app = create_app()
