"""Deel webhook receiver.

POST /deel/webhook — receives all Deel webhook events.
  1. Read raw body (before JSON parsing)
  2. Verify HMAC-SHA256 signature (FIRST operation, no exceptions)
  3. Parse payload from the same bytes
  4. Log the event and return 200

What a trusted event means for the business is handled elsewhere.
"""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from deel_gateway.config import Settings, get_settings
from deel_gateway.core.security import (
    RejectionReason,
    VerificationResult,
    verify_deel_signature,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhooks"])

# Status code and credential-free detail returned for each rejection.
_REJECTION_RESPONSES: dict[RejectionReason, tuple[int, str]] = {
    RejectionReason.MISSING_SIGNATURE: (401, "Missing signature header"),
    RejectionReason.SECRET_NOT_CONFIGURED: (500, "Webhook signing key not configured"),
    RejectionReason.SIGNATURE_MISMATCH: (401, "Invalid signature"),
}


def _raise_for_rejection(result: VerificationResult) -> None:
    if result.authentic:
        return
    if result.reason is None:
        raise RuntimeError("Rejected verification result carries no reason")
    status_code, detail = _REJECTION_RESPONSES[result.reason]
    raise HTTPException(status_code=status_code, detail=detail)


@router.post("/webhook", status_code=200)
async def receive_deel_webhook(
    request: Request,
    config: Settings = Depends(get_settings),
) -> dict[str, str]:
    """Receive and validate a Deel webhook event.

    Returns:
        {"status": "accepted"} on success.

    Raises:
        HTTPException(401): if the signature is missing or invalid.
        HTTPException(500): if the signing key is not configured.
        HTTPException(400): if the verified body is not a JSON object.
    """
    # Step 1: Read raw body BEFORE parsing; the signature covers these exact bytes.
    body = await request.body()

    # Step 2: Verify signature.
    result = verify_deel_signature(
        body,
        request.headers.get(config.deel_signature_header),
        config.deel_webhook_signing_key,
        request.method,
    )
    _raise_for_rejection(result)

    # Step 3: Parse the validated payload.
    try:
        payload = json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError):
        payload = None
    if not isinstance(payload, dict):
        logger.warning("Verified webhook body is not a JSON object")
        raise HTTPException(status_code=400, detail="Webhook body is not a JSON object")

    event_type: str = str(payload.get("event") or payload.get("type") or "unknown")

    logger.info("Received valid webhook", extra={"event": event_type})

    return {"status": "accepted"}
