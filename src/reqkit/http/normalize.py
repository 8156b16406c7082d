"""Response normalization: raw transport output -> NormalizedResponse."""

from __future__ import annotations

import time
from collections.abc import Mapping
from datetime import UTC, datetime

from reqkit.io.transport import RawResponse

from .models import NormalizedResponse


def normalize_response(
    url: str,
    status: int,
    status_text: str,
    headers: Mapping[str, str],
    body: str,
    started_at: float,
) -> NormalizedResponse:
    """Build the uniform response record for one completed attempt.

    Args:
        url: Final request URL
        status: Raw status code
        status_text: Reason phrase (may be empty)
        headers: Response headers
        body: Decoded body text
        started_at: ``time.monotonic()`` reading taken when execution started

    ``duration_ms`` is clamped at 0; ``ok`` derives from status alone.
    """
    duration_ms = max(0, round((time.monotonic() - started_at) * 1000))
    return NormalizedResponse(
        url=url,
        status=status,
        status_text=status_text,
        headers=dict(headers),
        body=body,
        timestamp=datetime.now(UTC),
        duration_ms=duration_ms,
    )


def normalize_raw(url: str, raw: RawResponse, started_at: float) -> NormalizedResponse:
    """`normalize_response` for a transport's RawResponse."""
    return normalize_response(url, raw.status, raw.status_text, raw.headers, raw.body, started_at)
