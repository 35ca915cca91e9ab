from __future__ import annotations

import pytest

from tests._fixtures.fake_browser import FakePageSpec, FakeSession, demo_site


@pytest.fixture
def site() -> dict[str, FakePageSpec]:
    """A seed page with links of every category and the pages they point to."""
    return demo_site()


@pytest.fixture
def session(site: dict[str, FakePageSpec]) -> FakeSession:
    return FakeSession(site)
