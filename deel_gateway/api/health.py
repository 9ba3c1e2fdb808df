"""Health-check endpoint.

Load balancers hit this endpoint to verify the gateway is responding.
It also reports whether the webhook signing key is present so a
misconfigured deployment shows up before the first delivery is rejected.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from deel_gateway.config import Settings, get_settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(config: Settings = Depends(get_settings)) -> dict[str, str]:
    """Return the gateway status.

    ``webhook_signing`` is ``"configured"`` or ``"missing"``; the key itself
    is never echoed.
    """
    return {
        "status": "healthy",
        "webhook_signing": "configured" if config.deel_webhook_signing_key else "missing",
    }
