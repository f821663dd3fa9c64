"""Pytest configuration and fixtures."""

import pytest
from httpx import ASGITransport, AsyncClient

from app.main import app


@pytest.fixture
async def client():
    """Async client bound to the patch service."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def draft_and_final():
    """Two revisions of a small document."""
    draft = {"name": "draft", "tags": ["a", "b"], "owner": {"id": 7}}
    final = {"name": "final", "tags": ["b"], "owner": {"id": 7}, "done": True}
    return draft, final
