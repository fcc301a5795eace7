"""Tests for the Sanity HTTP client."""

import json
from urllib.parse import urlencode
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from storefront.catalog.filters import ProductFilter, SortOrder
from storefront.catalog.queries import (
    ALL_PRODUCTS_QUERY,
    FILTERED_PRODUCTS_QUERIES,
    PRODUCT_BY_SLUG_QUERY,
    PRODUCTS_BY_IDS_QUERY,
)
from storefront.domain.exceptions import (
    ContentStoreError,
    ContentStoreTimeoutError,
    QueryParameterError,
)
from storefront.infrastructure.sanity_client import MAX_GET_URL_LENGTH, SanityClient


def _response(status_code: int = 200, payload=None) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    return response


class TestSanityClient:
    """Tests for SanityClient."""

    @pytest.fixture
    def client(self):
        """Create a test client."""
        return SanityClient(project_id="abc123", dataset="production", api_version="2024-01-01")

    def test_client_initialization(self, client):
        """Test client initialization."""
        assert client.base_url == "https://abc123.apicdn.sanity.io/v2024-01-01"
        assert client.query_path == "/data/query/production"
        assert client._client is None

    def test_live_api_host(self):
        """Test the live API host is used without the CDN."""
        client = SanityClient(
            project_id="abc123", dataset="staging", api_version="v2021-10-21", use_cdn=False
        )

        assert client.base_url == "https://abc123.api.sanity.io/v2021-10-21"
        assert client.query_path == "/data/query/staging"

    @pytest.mark.asyncio
    async def test_fetch_success(self, client):
        """Test a GET query returns the result member."""
        response = _response(payload={"ms": 4, "query": "...", "result": [{"_id": "p1"}]})

        with patch.object(client, "_get_client", new_callable=AsyncMock) as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.get = AsyncMock(return_value=response)
            mock_get_client.return_value = mock_http_client

            result = await client.fetch(PRODUCT_BY_SLUG_QUERY, {"slug": "velvet-sofa"})

            assert result == [{"_id": "p1"}]
            args, kwargs = mock_http_client.get.call_args
            assert args[0] == "/data/query/production"
            assert kwargs["params"]["query"] == PRODUCT_BY_SLUG_QUERY.render()
            assert kwargs["params"]["$slug"] == '"velvet-sofa"'
            assert kwargs["params"]["perspective"] == "published"
            mock_http_client.post.assert_not_called()

    @pytest.mark.asyncio
    async def test_parameters_json_encoded(self, client):
        """Test every parameter is sent as JSON."""
        response = _response(payload={"result": []})

        with patch.object(client, "_get_client", new_callable=AsyncMock) as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.get = AsyncMock(return_value=response)
            mock_get_client.return_value = mock_http_client

            await client.fetch(
                FILTERED_PRODUCTS_QUERIES[SortOrder.NAME],
                ProductFilter(min_price=100, in_stock=True).to_params(),
            )

            params = mock_http_client.get.call_args.kwargs["params"]
            assert params["$minPrice"] == "100"
            assert params["$maxPrice"] == "0"
            assert params["$inStock"] == "true"
            assert params["$color"] == '""'

    @pytest.mark.asyncio
    async def test_single_result_none(self, client):
        """Test a null result is returned as None."""
        response = _response(payload={"result": None})

        with patch.object(client, "_get_client", new_callable=AsyncMock) as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.get = AsyncMock(return_value=response)
            mock_get_client.return_value = mock_http_client

            assert await client.fetch(PRODUCT_BY_SLUG_QUERY, {"slug": "nope"}) is None

    @pytest.mark.asyncio
    async def test_long_query_uses_post(self, client):
        """Test requests too long for a URL are sent as POST."""
        ids = [f"product-{n:05d}-{'x' * 40}" for n in range(300)]
        response = _response(payload={"result": []})

        with patch.object(client, "_get_client", new_callable=AsyncMock) as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.post = AsyncMock(return_value=response)
            mock_get_client.return_value = mock_http_client

            assert len(json.dumps(ids)) > MAX_GET_URL_LENGTH

            result = await client.fetch(PRODUCTS_BY_IDS_QUERY, {"ids": ids})

            assert result == []
            mock_http_client.get.assert_not_called()
            args, kwargs = mock_http_client.post.call_args
            assert args[0] == "/data/query/production"
            assert kwargs["json"] == {"query": PRODUCTS_BY_IDS_QUERY.render(), "params": {"ids": ids}}
            assert kwargs["params"] == {"perspective": "published"}

    @pytest.mark.asyncio
    async def test_host_counts_toward_url_length(self, client):
        """Test the host is included when choosing between GET and POST."""
        params = {"slug": "velvet-sofa"}
        encoded = urlencode(
            {
                "query": PRODUCT_BY_SLUG_QUERY.render(),
                "perspective": "published",
                "$slug": json.dumps(params["slug"]),
            }
        )
        path_and_query = len(client.query_path) + len(encoded) + 1
        response = _response(payload={"result": None})

        with patch(
            "storefront.infrastructure.sanity_client.MAX_GET_URL_LENGTH", path_and_query + 10
        ), patch.object(client, "_get_client", new_callable=AsyncMock) as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.post = AsyncMock(return_value=response)
            mock_get_client.return_value = mock_http_client

            assert len(client.base_url) > 10

            await client.fetch(PRODUCT_BY_SLUG_QUERY, params)

            mock_http_client.get.assert_not_called()
            assert mock_http_client.post.call_args.kwargs["json"] == {
                "query": PRODUCT_BY_SLUG_QUERY.render(),
                "params": params,
            }

    @pytest.mark.asyncio
    async def test_missing_parameter(self, client):
        """Test missing parameters fail before any request."""
        with patch.object(client, "_get_client", new_callable=AsyncMock) as mock_get_client:
            with pytest.raises(QueryParameterError):
                await client.fetch(PRODUCT_BY_SLUG_QUERY, {})

            mock_get_client.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_query_error(self, client):
        """Test error responses raise with the upstream description."""
        response = _response(
            status_code=400,
            payload={
                "error": {
                    "description": "expected ']' following expression",
                    "type": "queryParseError",
                }
            },
        )

        with patch.object(client, "_get_client", new_callable=AsyncMock) as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.get = AsyncMock(return_value=response)
            mock_get_client.return_value = mock_http_client

            with pytest.raises(ContentStoreError) as exc_info:
                await client.fetch(ALL_PRODUCTS_QUERY)

            assert exc_info.value.status_code == 400
            assert exc_info.value.message == "expected ']' following expression"

    @pytest.mark.asyncio
    async def test_unauthorized_message(self, client):
        """Test plain message error bodies."""
        response = _response(status_code=401, payload={"message": "Session not found"})

        with patch.object(client, "_get_client", new_callable=AsyncMock) as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.get = AsyncMock(return_value=response)
            mock_get_client.return_value = mock_http_client

            with pytest.raises(ContentStoreError) as exc_info:
                await client.fetch(ALL_PRODUCTS_QUERY)

            assert exc_info.value.status_code == 401
            assert exc_info.value.message == "Session not found"

    @pytest.mark.asyncio
    async def test_non_json_error(self, client):
        """Test error bodies that are not JSON."""
        response = MagicMock()
        response.status_code = 502
        response.json.side_effect = ValueError("not json")
        response.text = "<html>Bad Gateway</html>"

        with patch.object(client, "_get_client", new_callable=AsyncMock) as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.get = AsyncMock(return_value=response)
            mock_get_client.return_value = mock_http_client

            with pytest.raises(ContentStoreError) as exc_info:
                await client.fetch(ALL_PRODUCTS_QUERY)

            assert exc_info.value.status_code == 502
            assert "Bad Gateway" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_request_timeout(self, client):
        """Test request timeout handling."""
        with patch.object(client, "_get_client", new_callable=AsyncMock) as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.get = AsyncMock(side_effect=httpx.ReadTimeout("timed out"))
            mock_get_client.return_value = mock_http_client

            with pytest.raises(ContentStoreTimeoutError) as exc_info:
                await client.fetch(ALL_PRODUCTS_QUERY)

            assert exc_info.value.details["timeout"] == 10.0

    @pytest.mark.asyncio
    async def test_request_error(self, client):
        """Test transport error handling."""
        with patch.object(client, "_get_client", new_callable=AsyncMock) as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.get = AsyncMock(side_effect=httpx.ConnectError("Connection refused"))
            mock_get_client.return_value = mock_http_client

            with pytest.raises(ContentStoreError) as exc_info:
                await client.fetch(ALL_PRODUCTS_QUERY)

            assert not isinstance(exc_info.value, ContentStoreTimeoutError)
            assert "Connection refused" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_missing_result(self, client):
        """Test responses without a result member are rejected."""
        response = _response(payload={"ms": 3})

        with patch.object(client, "_get_client", new_callable=AsyncMock) as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.get = AsyncMock(return_value=response)
            mock_get_client.return_value = mock_http_client

            with pytest.raises(ContentStoreError):
                await client.fetch(ALL_PRODUCTS_QUERY)

    @pytest.mark.asyncio
    async def test_malformed_body(self, client):
        """Test successful responses that are not JSON are rejected."""
        response = MagicMock()
        response.status_code = 200
        response.json.side_effect = ValueError("Expecting value")

        with patch.object(client, "_get_client", new_callable=AsyncMock) as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.get = AsyncMock(return_value=response)
            mock_get_client.return_value = mock_http_client

            with pytest.raises(ContentStoreError) as exc_info:
                await client.fetch(ALL_PRODUCTS_QUERY)

            assert exc_info.value.message == "Malformed response from content store"

    @pytest.mark.asyncio
    async def test_http_client_headers(self):
        """Test the token is sent as a header and nothing else identifies the caller."""
        client = SanityClient(
            project_id="abc123",
            dataset="production",
            token="sk-read",
        )

        http_client = await client._get_client()

        assert http_client.headers["Authorization"] == "Bearer sk-read"
        assert "X-Request-ID" not in http_client.headers
        assert str(http_client.base_url).startswith("https://abc123.apicdn.sanity.io/v2024-01-01")
        assert await client._get_client() is http_client

        await client.close()
        assert client._client is None

    @pytest.mark.asyncio
    async def test_no_token_header(self, client):
        """Test public datasets are queried without Authorization."""
        http_client = await client._get_client()

        assert "Authorization" not in http_client.headers

        await client.close()
