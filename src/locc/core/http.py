"""
HTTP helpers.

This module centralizes the minimal HTTP client logic used by the geocoding client.

Design goals:
- Small surface area (GET JSON only; Nominatim has no write endpoints we use).
- Deterministic defaults (timeout + User-Agent).
- Raise on non-2xx so callers can decide how to fail.
"""

from __future__ import annotations

from typing import Any

import httpx

from locc import __version__

DEFAULT_USER_AGENT = f"locc v{__version__}"


def get_json(
    url: str,
    *,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    timeout_seconds: float = 15,
) -> Any:
    """GET `url` and return the decoded JSON response.

    `headers` are merged over the defaults, so callers can replace the User-Agent.

    Raises:
        httpx.HTTPError: On transport errors or non-2xx status codes.
        ValueError: If the response body is not valid JSON.
    """
    request_headers = {"User-Agent": DEFAULT_USER_AGENT}
    if headers:
        request_headers.update(headers)

    with httpx.Client(timeout=timeout_seconds) as client:
        resp = client.get(url, params=params, headers=request_headers)
        resp.raise_for_status()
        return resp.json()
