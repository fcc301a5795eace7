"""Shared fixtures for API tests."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from storefront.infrastructure.config import settings
from storefront.infrastructure.content_store import set_content_store
from storefront.main import app


@pytest.fixture
def client(memory_store) -> Iterator[TestClient]:
    """Create test client over the sample dataset, without authentication."""
    set_content_store(memory_store)
    yield TestClient(app)
    set_content_store(None)


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Get admin authentication headers."""
    return {"Authorization": f"Bearer {settings.admin_api_key}"}


@pytest.fixture
def broken_client(failing_store) -> Iterator[TestClient]:
    """Create test client whose content store is unreachable."""
    set_content_store(failing_store)
    yield TestClient(app)
    set_content_store(None)
