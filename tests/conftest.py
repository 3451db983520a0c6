from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from agentda.api.main import app
from agentda.ratelimit import get_rate_limiter


@pytest.fixture(autouse=True)
def fresh_rate_limiter() -> Iterator[None]:
    """Each test starts with empty rate-limit windows."""
    get_rate_limiter.cache_clear()
    yield
    get_rate_limiter.cache_clear()
    app.dependency_overrides.clear()


@pytest.fixture
def client() -> TestClient:
    return TestClient(app, raise_server_exceptions=False)
