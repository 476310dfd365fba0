"""Response error extraction for load test observability.

Parses storefront API error responses into human-readable messages.
Every error body has the shape ``{"success": false, "message": "..."}``;
checkout rejections add a ``problems`` list.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """Extract a human-readable error message from an API error response.

    Returns a compact string suitable for Locust failure messages and log lines.
    Gracefully handles unparseable bodies and missing fields.
    """
    try:
        body = response.json()
    except Exception:
        # Not JSON, return raw text truncated
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if body.get("problems"):
        return " | ".join(body["problems"])

    if "message" in body:
        return str(body["message"])

    # Unknown shape, stringify and truncate
    return str(body)[:300]
