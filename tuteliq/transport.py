"""
tuteliq/transport.py
=====================
HTTP Transport — Tuteliq Python SDK

Responsibility:
    - Perform exactly ONE HTTP call per invocation (no retry here)
    - Inject the bearer token and per-call timeout
    - Send JSON bodies or multipart file uploads
    - Map timeouts, connection failures and HTTP error statuses to
      TuteliqError kinds
    - Read the request id and monthly usage headers from successful responses

This module does NOT:
    - Retry failed calls (see retry.py)
    - Know anything about individual endpoints or result types
    - Touch the voice streaming WebSocket
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any

import aiohttp

from tuteliq.errors import ErrorKind, TuteliqError, error_from_status

logger = logging.getLogger("tuteliq.transport")


# ---------------------------------------------------------------------------
# Response metadata
# ---------------------------------------------------------------------------

REQUEST_ID_HEADER = "x-request-id"
USAGE_LIMIT_HEADER = "x-monthly-limit"
USAGE_USED_HEADER = "x-monthly-used"
USAGE_REMAINING_HEADER = "x-monthly-remaining"


@dataclass(frozen=True)
class Usage:
    """Monthly credit counters reported by the API."""

    limit: int
    used: int
    remaining: int


@dataclass(frozen=True)
class ApiResponse:
    """Decoded body of a successful call plus its header metadata."""

    data: Any
    request_id: str | None = None
    usage: Usage | None = None


def _parse_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def parse_usage(headers: Any) -> Usage | None:
    """
    Build a Usage snapshot from response headers.

    Returns None unless all three monthly counters are present and numeric.
    """
    limit = _parse_int(headers.get(USAGE_LIMIT_HEADER))
    used = _parse_int(headers.get(USAGE_USED_HEADER))
    remaining = _parse_int(headers.get(USAGE_REMAINING_HEADER))
    if limit is None or used is None or remaining is None:
        return None
    return Usage(limit=limit, used=used, remaining=remaining)


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------


class Transport:
    """Single-attempt HTTP caller bound to one base URL and API key."""

    def __init__(
        self,
        api_key: str,
        base_url: str,
        timeout: float,
        session: aiohttp.ClientSession | None = None,
    ):
        self._api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session
        self._owns_session = session is None

    def _ensure_session(self) -> aiohttp.ClientSession:
        # ClientSession must be created inside a running event loop.
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    def _auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._api_key}"}

    async def request(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
    ) -> ApiResponse:
        """
        Perform one JSON request.

        Args:
            method: GET, POST, PATCH or DELETE.
            path:   Path (and query string) relative to the base URL.
            body:   Optional JSON body.

        Raises:
            TuteliqError: TIMEOUT, NETWORK, or the kind mapped from the
                          response status.
        """
        headers = self._auth_headers()
        headers["Content-Type"] = "application/json"
        data = json.dumps(body) if body is not None else None
        return await self._send(method, path, headers=headers, data=data)

    async def upload(
        self,
        path: str,
        file: bytes,
        filename: str,
        field_name: str = "file",
        fields: dict[str, str] | None = None,
    ) -> ApiResponse:
        """
        Perform one multipart/form-data POST carrying a single file.

        Args:
            path:       Path relative to the base URL.
            file:       Raw file bytes.
            filename:   Filename reported for the file part.
            field_name: Form field holding the file.
            fields:     Extra string form fields.
        """
        form = aiohttp.FormData()
        for name, value in (fields or {}).items():
            form.add_field(name, value)
        form.add_field(field_name, file, filename=filename)
        return await self._send("POST", path, headers=self._auth_headers(), data=form)

    async def _send(
        self,
        method: str,
        path: str,
        headers: dict[str, str],
        data: Any,
    ) -> ApiResponse:
        url = f"{self.base_url}{path}"
        session = self._ensure_session()
        logger.debug("%s %s", method, path)

        try:
            async with session.request(
                method,
                url,
                headers=headers,
                data=data,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as resp:
                status = resp.status
                resp_headers = resp.headers
                # Proxies can answer with non-UTF-8 pages; never fail on decoding.
                text = await resp.text(errors="replace")
        except asyncio.TimeoutError as exc:
            raise TuteliqError(
                ErrorKind.TIMEOUT, f"Request timed out after {self.timeout:g}s"
            ) from exc
        except aiohttp.ClientError as exc:
            raise TuteliqError(ErrorKind.NETWORK, str(exc) or type(exc).__name__) from exc

        if status >= 400:
            error = error_from_status(status, text)
            logger.debug("%s %s failed with %d: %s", method, path, status, error.message)
            raise error

        try:
            payload = json.loads(text) if text else {}
        except ValueError as exc:
            raise TuteliqError(
                ErrorKind.GENERIC, "Response body is not valid JSON"
            ) from exc

        return ApiResponse(
            data=payload,
            request_id=resp_headers.get(REQUEST_ID_HEADER),
            usage=parse_usage(resp_headers),
        )

    async def close(self) -> None:
        """Close the underlying HTTP session if this transport created it."""
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        self._session = None
