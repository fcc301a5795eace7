"""Content store selection.

Builds the configured content store (Sanity or in-memory) and keeps one
shared instance for the process.
"""

from typing import Any, Protocol

import structlog

from storefront.catalog.groq import Query
from storefront.infrastructure.config import Settings, settings
from storefront.infrastructure.memory_store import InMemoryDocumentStore
from storefront.infrastructure.sanity_client import SanityClient

logger = structlog.get_logger()


class ContentStore(Protocol):
    """Anything that can answer a typed query."""

    async def fetch(self, query: Query, params: dict[str, Any] | None = None) -> Any:
        ...

    async def close(self) -> None:
        ...


def create_content_store(config: Settings = settings) -> ContentStore:
    """Create the content store named by the configuration.

    Args:
        config: Application settings.

    Returns:
        SanityClient, or InMemoryDocumentStore when content_backend is "memory".

    Raises:
        ValueError: If the backend name is unknown.
    """
    if config.content_backend == "memory":
        if config.content_fixture_path:
            return InMemoryDocumentStore.from_ndjson(config.content_fixture_path)
        logger.warning("Memory content store started without fixture data")
        return InMemoryDocumentStore()

    if config.content_backend == "sanity":
        logger.info(
            "Using Sanity content store",
            project_id=config.sanity_project_id,
            dataset=config.sanity_dataset,
            use_cdn=config.sanity_use_cdn,
        )
        return SanityClient(
            project_id=config.sanity_project_id,
            dataset=config.sanity_dataset,
            api_version=config.sanity_api_version,
            token=config.sanity_token,
            use_cdn=config.sanity_use_cdn,
            timeout=config.sanity_timeout,
        )

    raise ValueError(f"Unknown content backend: {config.content_backend}")


# Global store instance
_content_store: ContentStore | None = None


def get_content_store() -> ContentStore:
    """Get the content store singleton.

    Returns:
        ContentStore instance.
    """
    global _content_store
    if _content_store is None:
        _content_store = create_content_store()
    return _content_store


def current_content_store() -> ContentStore | None:
    """Return the content store singleton without creating it."""
    return _content_store


def set_content_store(store: ContentStore | None) -> None:
    """Replace the content store singleton (None resets it)."""
    global _content_store
    _content_store = store


async def close_content_store() -> None:
    """Close and drop the content store singleton."""
    global _content_store
    if _content_store is not None:
        await _content_store.close()
        _content_store = None
