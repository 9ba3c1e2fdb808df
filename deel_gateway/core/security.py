"""HMAC-SHA256 webhook signature verification for Deel deliveries.

Every incoming webhook is verified BEFORE any other processing. The signed
message is the upper-cased HTTP method followed by the raw request body,
exactly as received on the wire. Uses hmac.compare_digest() for
constant-time comparison to prevent timing attacks.

The verifier is a pure function: it never raises for a bad request and
never reads configuration itself. Callers pass the secret in and map the
returned ``VerificationResult`` onto their own error surface.
"""

from __future__ import annotations

import enum
import hashlib
import hmac
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class RejectionReason(str, enum.Enum):
    """Why a webhook delivery was not trusted."""

    MISSING_SIGNATURE = "missing signature header"
    SECRET_NOT_CONFIGURED = "signing secret not configured"
    SIGNATURE_MISMATCH = "signature mismatch"


@dataclass(frozen=True, slots=True)
class VerificationResult:
    """Outcome of verifying one webhook delivery."""

    authentic: bool
    reason: RejectionReason | None = None

    @classmethod
    def accept(cls) -> VerificationResult:
        return cls(authentic=True)

    @classmethod
    def reject(cls, reason: RejectionReason) -> VerificationResult:
        return cls(authentic=False, reason=reason)


def _redact(value: str) -> str:
    """Show only enough of a signature to correlate log lines."""
    return f"{value[:4]}***(len={len(value)})"


def compute_deel_signature(raw_body: bytes, secret: str, method: str = "POST") -> str:
    """Return the lowercase-hex HMAC-SHA256 Deel would send for this request.

    Deel signs: HMAC-SHA256(secret, METHOD + body)
    """
    message = method.upper().encode("ascii") + raw_body
    return hmac.new(
        key=secret.encode("utf-8"),
        msg=message,
        digestmod=hashlib.sha256,
    ).hexdigest()


def verify_deel_signature(
    raw_body: bytes,
    claimed_signature: str | None,
    secret: str | None,
    method: str = "POST",
) -> VerificationResult:
    """Decide whether a Deel webhook delivery is authentic.

    Args:
        raw_body: Request body bytes as received, before any JSON parsing.
        claimed_signature: Value of the signature header, if any.
        secret: The shared webhook signing key from configuration.
        method: HTTP verb of the request; part of the signed message.

    Returns:
        ``VerificationResult.accept()`` when the signature matches, otherwise
        a rejection carrying one of the three ``RejectionReason`` values.
    """
    if not claimed_signature:
        logger.warning("Webhook rejected: missing signature header")
        return VerificationResult.reject(RejectionReason.MISSING_SIGNATURE)

    if not secret:
        logger.error("Webhook rejected: signing secret is not configured")
        return VerificationResult.reject(RejectionReason.SECRET_NOT_CONFIGURED)

    expected_signature = compute_deel_signature(raw_body, secret, method)

    # CRITICAL: constant-time comparison prevents timing side-channel attacks.
    # Bytes on both sides so a non-ASCII header value is a mismatch, not a TypeError.
    if not hmac.compare_digest(
        expected_signature.encode("ascii"),
        claimed_signature.encode("utf-8"),
    ):
        logger.warning(
            "Webhook rejected: invalid HMAC signature",
            extra={"signature": _redact(claimed_signature)},
        )
        return VerificationResult.reject(RejectionReason.SIGNATURE_MISMATCH)

    logger.debug("Webhook signature verified")
    return VerificationResult.accept()
