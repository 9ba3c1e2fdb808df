"""Tests for the Deel API client and the contracts endpoint.

The client is exercised against ``httpx.MockTransport`` so no request
leaves the process.
"""

from __future__ import annotations

from collections.abc import Iterator
from unittest.mock import AsyncMock, patch

import httpx
import pytest
from fastapi.testclient import TestClient

from deel_gateway.config import Settings, get_settings
from deel_gateway.core.deel_client import DeelClient
from deel_gateway.core.exceptions import (
    DeelAPIError,
    DeelAuthError,
    DeelRateLimitError,
)
from deel_gateway.main import app

BASE_URL = "https://api.test.deel.com/v1"
CONTRACTS = {
    "data": [{"id": "m3jk2j", "title": "Engineer"}, {"id": "n8x2pq", "title": "Designer"}],
    "page": {"cursor": "n8x2pq", "total_rows": 2},
}


def _client(handler, token: str = "tok_123") -> DeelClient:
    return DeelClient(token, BASE_URL, transport=httpx.MockTransport(handler))


# =============================================================================
#  DeelClient
# =============================================================================


class TestDeelClient:
    @pytest.mark.asyncio
    async def test_list_contracts_sends_bearer_token(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=CONTRACTS)

        result = await _client(handler).list_contracts()

        assert result == CONTRACTS
        assert seen[0].method == "GET"
        assert str(seen[0].url) == f"{BASE_URL}/contracts"
        assert seen[0].headers["Authorization"] == "Bearer tok_123"
        assert seen[0].headers["Accept"] == "application/json"

    @pytest.mark.asyncio
    async def test_list_contracts_pagination_params(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=CONTRACTS)

        await _client(handler).list_contracts(limit=50, after_cursor="abc")

        assert seen[0].url.params["limit"] == "50"
        assert seen[0].url.params["after_cursor"] == "abc"

    @pytest.mark.asyncio
    async def test_trailing_slash_in_base_url(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=CONTRACTS)

        client = DeelClient("tok", BASE_URL + "/", transport=httpx.MockTransport(handler))
        await client.list_contracts()
        assert str(seen[0].url) == f"{BASE_URL}/contracts"

    @pytest.mark.asyncio
    async def test_missing_token_raises_without_request(self) -> None:
        handler = AsyncMock()
        with pytest.raises(DeelAuthError):
            await _client(handler, token="").list_contracts()
        handler.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [401, 403])
    async def test_auth_failure(self, status: int) -> None:
        with pytest.raises(DeelAuthError):
            await _client(lambda r: httpx.Response(status)).list_contracts()

    @pytest.mark.asyncio
    async def test_rate_limit(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(429, headers={"Retry-After": "30"})

        with pytest.raises(DeelRateLimitError) as exc_info:
            await _client(handler).list_contracts()
        assert exc_info.value.retry_after == "30"

    @pytest.mark.asyncio
    async def test_server_error_carries_status(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="bad gateway")

        with pytest.raises(DeelAPIError) as exc_info:
            await _client(handler).list_contracts()
        assert exc_info.value.status_code == 502
        assert "bad gateway" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_transport_error_wrapped(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(DeelAPIError):
            await _client(handler).list_contracts()

    @pytest.mark.asyncio
    async def test_non_json_body_raises_api_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>maintenance</html>")

        with pytest.raises(DeelAPIError) as exc_info:
            await _client(handler).list_contracts()
        assert exc_info.value.status_code == 200
        assert "not JSON" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_json_array_body_raises_api_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=[1, 2])

        with pytest.raises(DeelAPIError) as exc_info:
            await _client(handler).list_contracts()
        assert exc_info.value.status_code == 200
        assert "expected an object" in str(exc_info.value)

    def test_from_settings(self) -> None:
        settings = Settings(_env_file=None, deel_access_token="tok", deel_api_url=BASE_URL)
        client = DeelClient.from_settings(settings)
        assert client.access_token == "tok"
        assert client.base_url == BASE_URL


# =============================================================================
#  GET /deel/contracts
# =============================================================================


@pytest.fixture()
def client() -> Iterator[TestClient]:
    test_settings = Settings(
        _env_file=None,
        deel_access_token="tok",
        deel_api_url=BASE_URL,
        deel_webhook_signing_key="",
    )
    app.dependency_overrides[get_settings] = lambda: test_settings
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


class TestContractsEndpoint:
    def test_returns_contracts(self, client: TestClient) -> None:
        with patch.object(DeelClient, "list_contracts", AsyncMock(return_value=CONTRACTS)) as mock:
            response = client.get("/deel/contracts", params={"limit": 10})

        assert response.status_code == 200
        assert response.json() == CONTRACTS
        mock.assert_awaited_once_with(limit=10, after_cursor=None)

    def test_deel_failure_returns_500(self, client: TestClient) -> None:
        failing = AsyncMock(side_effect=DeelAPIError("upstream down", status_code=503))
        with patch.object(DeelClient, "list_contracts", failing):
            response = client.get("/deel/contracts")

        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to fetch contracts: upstream down"

    def test_invalid_limit_rejected(self, client: TestClient) -> None:
        assert client.get("/deel/contracts", params={"limit": 0}).status_code == 422

    @pytest.mark.parametrize(
        "upstream",
        [{"text": "<html>maintenance</html>"}, {"json": [1, 2]}],
    )
    def test_malformed_upstream_body_returns_500(
        self, client: TestClient, upstream: dict
    ) -> None:
        upstream_client = _client(lambda request: httpx.Response(200, **upstream))
        with patch.object(DeelClient, "from_settings", return_value=upstream_client):
            response = client.get("/deel/contracts")

        assert response.status_code == 500
        assert response.json()["detail"].startswith("Failed to fetch contracts: ")


# =============================================================================
#  GET /health
# =============================================================================


class TestHealth:
    def test_reports_missing_signing_key(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "webhook_signing": "missing"}

    def test_reports_configured_signing_key(self) -> None:
        app.dependency_overrides[get_settings] = lambda: Settings(
            _env_file=None, deel_webhook_signing_key="k3y"
        )
        try:
            response = TestClient(app).get("/health")
        finally:
            app.dependency_overrides.clear()

        assert response.json()["webhook_signing"] == "configured"
        assert "k3y" not in response.text
