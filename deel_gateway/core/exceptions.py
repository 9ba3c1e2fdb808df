"""Domain-specific exceptions for the Deel gateway.

Webhook verification does not raise: it returns a ``VerificationResult``
that the HTTP layer maps to a status code. Outbound Deel API failures
raise one of the exceptions below so callers can handle them precisely.
"""

from __future__ import annotations


# =============================================================================
# Deel API
# =============================================================================


class DeelError(Exception):
    """Base exception for all Deel API failures."""


class DeelAuthError(DeelError):
    """Access token is missing, invalid or lacks scope — check DEEL_ACCESS_TOKEN."""


class DeelRateLimitError(DeelError):
    """Deel API rate limit exceeded."""

    def __init__(self, message: str = "Rate limit exceeded", retry_after: str = "") -> None:
        self.retry_after = retry_after
        super().__init__(message)


class DeelAPIError(DeelError):
    """Generic Deel API error with status code context."""

    def __init__(self, message: str, status_code: int = 0) -> None:
        self.status_code = status_code
        super().__init__(message)
