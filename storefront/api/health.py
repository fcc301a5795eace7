"""Health check endpoints.

Liveness reports the service and version. Readiness reports whether the
content store has been built and, for the in-memory backend, how many
documents it holds.
"""

from fastapi import APIRouter, Response, status
from pydantic import BaseModel

from storefront.infrastructure.config import settings
from storefront.infrastructure.content_store import current_content_store
from storefront.infrastructure.memory_store import InMemoryDocumentStore

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    service: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness response schema.

    documents is only known for the in-memory store.
    """

    status: str
    content_backend: str
    store: str | None = None
    documents: int | None = None


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Check service health.

    Returns:
        Health status with service name and version.
    """
    return HealthResponse(
        status="healthy",
        service="storefront-api",
        version=settings.api_version,
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"model": ReadinessResponse}},
)
async def readiness_check(response: Response) -> ReadinessResponse:
    """Check if the content store is built and can take queries.

    Returns:
        Readiness status. 503 until the store exists, or while an
        in-memory store holds no documents.
    """
    store = current_content_store()
    if store is None:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return ReadinessResponse(status="not_ready", content_backend=settings.content_backend)

    documents = len(store) if isinstance(store, InMemoryDocumentStore) else None
    ready = documents is None or documents > 0
    if not ready:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return ReadinessResponse(
        status="ready" if ready else "not_ready",
        content_backend=settings.content_backend,
        store=type(store).__name__,
        documents=documents,
    )
