"""Deel REST API client.

Wraps the subset of the Deel API the gateway exposes:
- Bearer-token authentication with the organization access token
- Contract listing

All methods use httpx.AsyncClient. No retries: a failed call raises one
of the ``DeelError`` subclasses and the caller decides what to do.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from deel_gateway.config import Settings, get_settings
from deel_gateway.core.exceptions import (
    DeelAPIError,
    DeelAuthError,
    DeelRateLimitError,
)

logger = logging.getLogger(__name__)

_BASE_HEADERS: dict[str, str] = {
    "Accept": "application/json",
}


class DeelClient:
    """Async Deel API client bound to one access token."""

    REQUEST_TIMEOUT_SECONDS = 30.0

    def __init__(
        self,
        access_token: str,
        base_url: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.access_token = access_token
        self.base_url = base_url.rstrip("/")
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> DeelClient:
        settings = settings or get_settings()
        return cls(settings.deel_access_token, settings.deel_api_url)

    # ------------------------------------------------------------------
    #  Core request method
    # ------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Make an authenticated Deel API request and map error statuses."""
        if not self.access_token:
            raise DeelAuthError("Deel access token is empty — check DEEL_ACCESS_TOKEN")

        request_headers = {
            "Authorization": f"Bearer {self.access_token}",
            **_BASE_HEADERS,
        }

        async with httpx.AsyncClient(
            timeout=self.REQUEST_TIMEOUT_SECONDS,
            transport=self._transport,
        ) as client:
            try:
                response = await client.request(
                    method,
                    f"{self.base_url}{path}",
                    headers=request_headers,
                    params=params,
                )
            except httpx.HTTPError as exc:
                raise DeelAPIError(f"Deel API request failed: {exc}") from exc

        if response.status_code in (401, 403):
            raise DeelAuthError(
                f"Deel rejected the access token ({response.status_code})"
            )
        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After", "")
            logger.warning(
                "Deel rate limit exceeded",
                extra={"path": path, "retry_after": retry_after},
            )
            raise DeelRateLimitError(
                f"Rate limit exceeded. Retry after: {retry_after or 'unknown'}",
                retry_after=retry_after,
            )
        if response.status_code >= 400:
            raise DeelAPIError(
                f"{method} {path} failed: {response.text}",
                status_code=response.status_code,
            )

        return response

    # ------------------------------------------------------------------
    #  Contracts
    # ------------------------------------------------------------------

    async def list_contracts(
        self,
        limit: int | None = None,
        after_cursor: str | None = None,
    ) -> dict[str, Any]:
        """Fetch one page of the organization's contracts."""
        params: dict[str, Any] = {}
        if limit is not None:
            params["limit"] = limit
        if after_cursor:
            params["after_cursor"] = after_cursor

        response = await self._request("GET", "/contracts", params=params or None)
        try:
            data = response.json()
        except ValueError as exc:
            raise DeelAPIError(
                "GET /contracts returned a body that is not JSON",
                status_code=response.status_code,
            ) from exc
        if not isinstance(data, dict):
            raise DeelAPIError(
                f"GET /contracts returned JSON {type(data).__name__}, expected an object",
                status_code=response.status_code,
            )

        contracts = data.get("data")
        logger.info(
            "Contracts fetched",
            extra={"count": len(contracts) if isinstance(contracts, list) else 0},
        )
        return data
