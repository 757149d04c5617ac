"""Perform a single HTTP request and normalize the response."""

import asyncio
import json
import logging
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlsplit

import aiohttp

from api_smoke.models.test_result import NormalizedResponse

logger = logging.getLogger(__name__)

VERSION = "1.0.0"
USER_AGENT = f"api-smoke/{VERSION}"


class TransportError(Exception):
    """Request could not be completed (connection, DNS, timeout, abort)."""


def decode_body(raw_body: str) -> Any:
    """Decode the body as JSON, falling back to the raw text."""
    try:
        return json.loads(raw_body)
    except (ValueError, RecursionError):
        return raw_body


def build_request_headers(
    headers: Mapping[str, str], has_body: bool
) -> dict[str, str]:
    """Add the client identification and content type headers."""
    names = {name.lower() for name in headers}
    request_headers = dict(headers)
    if "user-agent" not in names:
        request_headers = {"User-Agent": USER_AGENT, **request_headers}
    if has_body and "content-type" not in names:
        request_headers["Content-Type"] = "application/json"
    return request_headers


def _normalize_headers(headers: Mapping[str, str]) -> dict[str, str]:
    normalized: dict[str, str] = {}
    for name, value in headers.items():
        key = name.lower()
        if key in normalized:
            normalized[key] = f"{normalized[key]}, {value}"
        else:
            normalized[key] = value
    return normalized


def _check_url(url: str) -> None:
    parts = urlsplit(url)
    if parts.scheme not in {"http", "https"} or not parts.netloc:
        raise TransportError(f"Invalid URL (expected absolute http(s) URL): {url}")


async def execute(
    session: aiohttp.ClientSession,
    url: str,
    method: str,
    headers: Mapping[str, str],
    body: Any,
    timeout_ms: int,
) -> NormalizedResponse:
    """Send one request and return the normalized response.

    Args:
        session: Session used for the round trip
        url: Absolute http or https URL
        method: HTTP method, ``GET`` when empty
        headers: Request headers
        body: JSON-serializable payload, sent only when not None
        timeout_ms: Deadline for the whole round trip

    Returns:
        Normalized response, whatever its status code

    Raises:
        TransportError: If no complete response was received

    """
    _check_url(url)
    method = (method or "GET").upper()
    data = json.dumps(body, default=str) if body is not None else None
    request_headers = build_request_headers(headers, data is not None)
    timeout = aiohttp.ClientTimeout(total=timeout_ms / 1000)

    logger.debug(f"{method} {url}")
    try:
        async with session.request(
            method, url, headers=request_headers, data=data, timeout=timeout
        ) as response:
            raw = await response.read()
            status = response.status
            response_headers = _normalize_headers(response.headers)
    except asyncio.TimeoutError as e:
        logger.warning(f"{method} {url} timed out after {timeout_ms}ms")
        raise TransportError(f"Timeout after {timeout_ms}ms") from e
    except aiohttp.ClientError as e:
        logger.warning(f"{method} {url} failed: {type(e).__name__}: {e}")
        raise TransportError(str(e) or type(e).__name__) from e

    raw_body = raw.decode("utf-8", errors="replace")
    return NormalizedResponse(
        status_code=status,
        headers=response_headers,
        raw_body=raw_body,
        parsed_body=decode_body(raw_body),
    )
