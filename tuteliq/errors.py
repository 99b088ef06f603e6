"""
tuteliq/errors.py
==================
Error Taxonomy — Tuteliq Python SDK

Responsibility:
    - Define the single SDK exception type, ``TuteliqError``
    - Enumerate the closed set of error kinds callers switch on
    - Map HTTP status codes + error bodies to the right kind
    - Declare which kinds must never be retried

Error body shape returned by the API::

    {"error": {"message": "...", "details": {...}}}

This module does NOT:
    - Perform HTTP calls (see transport.py)
    - Decide retry timing (see retry.py)
"""

import json
import logging
from enum import Enum
from typing import Any

logger = logging.getLogger("tuteliq.errors")


# ---------------------------------------------------------------------------
# Error kinds
# ---------------------------------------------------------------------------


class ErrorKind(str, Enum):
    """Stable error classification exposed on every TuteliqError."""

    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    QUOTA_EXCEEDED = "quota_exceeded"
    TIER_ACCESS = "tier_access"
    NOT_FOUND = "not_found"
    RATE_LIMIT = "rate_limit"
    SERVER = "server"
    GENERIC = "generic"
    TIMEOUT = "timeout"
    NETWORK = "network"
    INVALID_STATE = "invalid_state"
    CONNECTION_CLOSED = "connection_closed"


# Client errors the server will keep rejecting no matter how often we retry
NON_RETRYABLE_KINDS: frozenset[ErrorKind] = frozenset({
    ErrorKind.AUTHENTICATION,
    ErrorKind.VALIDATION,
    ErrorKind.NOT_FOUND,
    ErrorKind.QUOTA_EXCEEDED,
    ErrorKind.TIER_ACCESS,
})

_STATUS_KINDS: dict[int, ErrorKind] = {
    400: ErrorKind.VALIDATION,
    401: ErrorKind.AUTHENTICATION,
    402: ErrorKind.QUOTA_EXCEEDED,
    403: ErrorKind.TIER_ACCESS,
    404: ErrorKind.NOT_FOUND,
    429: ErrorKind.RATE_LIMIT,
}

DEFAULT_ERROR_MESSAGE = "Request failed"


# ---------------------------------------------------------------------------
# Exception
# ---------------------------------------------------------------------------


class TuteliqError(Exception):
    """Raised for every failure surfaced by the SDK.

    Callers should branch on ``kind`` rather than parse ``message``.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        details: Any = None,
        status_code: int | None = None,
    ):
        self.kind = kind
        self.message = message
        self.details = details
        self.status_code = status_code
        super().__init__(message)

    @property
    def retryable(self) -> bool:
        return self.kind not in NON_RETRYABLE_KINDS

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.kind.value} ({self.status_code}): {self.message}"
        return f"{self.kind.value}: {self.message}"

    def __repr__(self) -> str:
        return (
            f"TuteliqError(kind={self.kind.value!r}, message={self.message!r}, "
            f"status_code={self.status_code!r})"
        )


# ---------------------------------------------------------------------------
# Status mapping
# ---------------------------------------------------------------------------


def kind_for_status(status: int) -> ErrorKind:
    """Return the ErrorKind for an HTTP status code >= 400."""
    if status in _STATUS_KINDS:
        return _STATUS_KINDS[status]
    if status >= 500:
        return ErrorKind.SERVER
    return ErrorKind.GENERIC


def parse_error_body(body_text: str | None) -> tuple[str, Any]:
    """
    Extract ``(message, details)`` from an API error body.

    Best-effort: anything that is not the documented JSON shape falls back
    to the generic message with no details.
    """
    if not body_text:
        return DEFAULT_ERROR_MESSAGE, None

    try:
        data = json.loads(body_text)
    except ValueError:
        logger.debug("Error body is not JSON, using generic message.")
        return DEFAULT_ERROR_MESSAGE, None

    error = data.get("error") if isinstance(data, dict) else None
    if not isinstance(error, dict):
        return DEFAULT_ERROR_MESSAGE, None

    message = error.get("message")
    if not isinstance(message, str) or not message:
        message = DEFAULT_ERROR_MESSAGE
    return message, error.get("details")


def error_from_status(status: int, body_text: str | None) -> TuteliqError:
    """Build the TuteliqError for a failed HTTP response."""
    message, details = parse_error_body(body_text)
    kind = kind_for_status(status)
    status_code = status if kind is ErrorKind.SERVER else None
    return TuteliqError(kind, message, details=details, status_code=status_code)
