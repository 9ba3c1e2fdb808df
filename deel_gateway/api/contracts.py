"""Contract listing endpoint — proxies the Deel contracts API."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query

from deel_gateway.config import Settings, get_settings
from deel_gateway.core.deel_client import DeelClient
from deel_gateway.core.exceptions import DeelError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["contracts"])


@router.get("/contracts")
async def list_contracts(
    limit: int | None = Query(default=None, ge=1, le=150),
    after_cursor: str | None = None,
    config: Settings = Depends(get_settings),
) -> dict[str, Any]:
    """Return one page of contracts from Deel.

    Raises:
        HTTPException(500): if the Deel API call fails for any reason.
    """
    client = DeelClient.from_settings(config)
    try:
        return await client.list_contracts(limit=limit, after_cursor=after_cursor)
    except DeelError as exc:
        logger.error("Error fetching contracts", extra={"error": str(exc)})
        raise HTTPException(
            status_code=500,
            detail=f"Failed to fetch contracts: {exc}",
        ) from exc
