"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from hrefcheck.api import app

    uvicorn hrefcheck.api:app
"""

from hrefcheck.api.app import app, create_app

__all__ = ["app", "create_app"]
