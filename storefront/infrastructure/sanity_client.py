"""Sanity HTTP client for running GROQ queries.

Thin async client over the Sanity query API. Handles authentication,
parameter encoding and error normalization; filtering, ordering and
scoring all happen inside Sanity.
"""

import json
from typing import Any
from urllib.parse import urlencode

import httpx
import structlog

from storefront.catalog.groq import Query
from storefront.domain.exceptions import ContentStoreError, ContentStoreTimeoutError

logger = structlog.get_logger()

# GET requests above this size are sent as POST instead.
MAX_GET_URL_LENGTH = 11 * 1024


class SanityClient:
    """HTTP client for the Sanity query API.

    Example usage:
        client = SanityClient(project_id="abc123", dataset="production")
        products = await client.fetch(ALL_PRODUCTS_QUERY)
        await client.close()
    """

    def __init__(
        self,
        project_id: str,
        dataset: str,
        api_version: str = "2024-01-01",
        token: str | None = None,
        use_cdn: bool = True,
        timeout: float = 10.0,
    ) -> None:
        """Initialize the Sanity client.

        Args:
            project_id: Sanity project ID.
            dataset: Dataset name.
            api_version: API version date, e.g. "2024-01-01".
            token: Optional read token for private datasets.
            use_cdn: Query the API CDN instead of the live API.
            timeout: Request timeout in seconds.
        """
        self.project_id = project_id
        self.dataset = dataset
        self.api_version = api_version.lstrip("v")
        self.token = token
        self.use_cdn = use_cdn
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    @property
    def base_url(self) -> str:
        host = "apicdn.sanity.io" if self.use_cdn else "api.sanity.io"
        return f"https://{self.project_id}.{host}/v{self.api_version}"

    @property
    def query_path(self) -> str:
        return f"/data/query/{self.dataset}"

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            headers = {"Accept": "application/json"}
            if self.token:
                headers["Authorization"] = f"Bearer {self.token}"
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=headers,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def fetch(self, query: Query, params: dict[str, Any] | None = None) -> Any:
        """Run a query and return its result.

        Args:
            query: Query to run.
            params: Values for the query's parameters.

        Returns:
            The ``result`` member of the response: a list of records, a
            single record, or None.

        Raises:
            QueryParameterError: If the query references a missing parameter.
            ContentStoreTimeoutError: If the request times out.
            ContentStoreError: On transport errors or unusable responses.
        """
        bound = query.bind(params)
        groq = query.render()
        client = await self._get_client()

        encoded = {"query": groq, "perspective": "published"}
        encoded.update({f"${name}": json.dumps(value) for name, value in bound.items()})

        try:
            logger.debug(
                "Querying content store",
                dataset=self.dataset,
                param_names=sorted(bound),
            )
            url_length = len(self.base_url) + len(self.query_path) + len(urlencode(encoded)) + 1
            if url_length <= MAX_GET_URL_LENGTH:
                response = await client.get(self.query_path, params=encoded)
            else:
                response = await client.post(
                    self.query_path,
                    params={"perspective": "published"},
                    json={"query": groq, "params": bound},
                )
        except httpx.TimeoutException as e:
            logger.error("Content store request timeout", dataset=self.dataset, error=str(e))
            raise ContentStoreTimeoutError(self.timeout) from e
        except httpx.RequestError as e:
            logger.error("Content store request failed", dataset=self.dataset, error=str(e))
            raise ContentStoreError(f"Request failed: {e}") from e

        if response.status_code != 200:
            message = _error_message(response)
            logger.warning(
                "Content store returned an error",
                status_code=response.status_code,
                error=message,
            )
            raise ContentStoreError(message, status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            raise ContentStoreError(
                "Malformed response from content store",
                status_code=response.status_code,
            ) from e

        if not isinstance(payload, dict) or "result" not in payload:
            raise ContentStoreError(
                "Response from content store has no result",
                status_code=response.status_code,
            )

        logger.debug("Content store query completed", ms=payload.get("ms"))
        return payload["result"]


def _error_message(response: httpx.Response) -> str:
    """Extract a readable message from a Sanity error response."""
    try:
        data = response.json()
    except ValueError:
        return f"Content store error {response.status_code}: {response.text[:200]}"

    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict):
        return error.get("description") or error.get("type") or "Unknown error"
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    if error:
        return str(error)
    return f"Content store error {response.status_code}"
