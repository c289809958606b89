"""Shared test helpers."""

from typing import Any, Optional

import httpx


def make_response(
    status_code: int = 200,
    json_data: Any = None,
    text: Optional[str] = None,
    url: str = "https://upstream.test",
) -> httpx.Response:
    """Build an httpx.Response the services can read like a real one."""
    request = httpx.Request("POST", url)
    if text is not None:
        return httpx.Response(status_code, text=text, request=request)
    return httpx.Response(status_code, json=json_data, request=request)
