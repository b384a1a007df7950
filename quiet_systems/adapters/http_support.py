"""Shared HTTP client helpers for upstream adapters."""

from __future__ import annotations

from typing import Any, Final

import httpx

ADAPTER_USER_AGENT: Final[str] = "quiet-systems/1.0 (Python/httpx)"


def adapter_create_http_client(timeout_seconds: float) -> httpx.AsyncClient:
    """Create the shared async HTTP client used by all upstream adapters.

    Args:
        timeout_seconds: Connect/read/write/pool timeout in seconds.

    Returns:
        httpx.AsyncClient: Client to be closed on application shutdown.

    Raises:
        ValueError: Raised when timeout_seconds is not positive.
    """

    if timeout_seconds <= 0:
        raise ValueError("timeout_seconds must be > 0")

    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout_seconds),
        headers={"User-Agent": ADAPTER_USER_AGENT},
        limits=httpx.Limits(max_connections=50, max_keepalive_connections=10),
    )


def adapter_response_detail(response: httpx.Response) -> Any:
    """Return decoded upstream error payload, falling back to response text.

    Args:
        response: Failed upstream response.

    Returns:
        Any: JSON payload when decodable, otherwise response text.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    try:
        return response.json()
    except ValueError:
        return response.text
