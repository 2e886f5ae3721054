from __future__ import annotations

from typing import Any

import httpx

DEFAULT_TIMEOUT = httpx.Timeout(30.0, connect=5.0)

# Per-endpoint ceilings; passed on each call so they override the client default.
TOKEN_TIMEOUT = httpx.Timeout(15.0)
RATING_TIMEOUT = httpx.Timeout(30.0)


def create_http_client(
    base_url: str | None = None,
    verify: bool | str = True,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """
    Shared HTTP client with sane defaults.
    Callers that need a stubbed carrier (tests, the CLI demo) pass a transport.
    """
    return httpx.Client(
        base_url=base_url or "",
        timeout=DEFAULT_TIMEOUT,
        follow_redirects=True,
        verify=verify,
        transport=transport,
    )


def response_body(response: httpx.Response) -> Any:
    """Decoded JSON body, or the raw text when the body is not JSON."""
    try:
        return response.json()
    except ValueError:
        return response.text
