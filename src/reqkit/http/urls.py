"""URL resolution: base URL + path + query parameters.

Pure string operations; never raises for any str input.
"""

from __future__ import annotations

from collections.abc import Mapping
from urllib.parse import urlencode

_SCHEMES = ("http://", "https://")


def is_absolute_url(url: str) -> bool:
    """Whether url starts with an http(s) scheme."""
    return url.startswith(_SCHEMES)


def _with_query(url: str, query: Mapping[str, str] | None) -> str:
    if not query:
        return url
    return f"{url}?{urlencode(dict(query))}"


def resolve_url(base: str, path: str, query: Mapping[str, str] | None = None) -> str:
    """Combine base and path into the final request URL.

    - Absolute ``path`` (http/https scheme) ignores ``base``.
    - Otherwise exactly one trailing slash is dropped from ``base`` and exactly
      one leading slash from ``path``, joined with a single slash.
    - Empty ``base`` keeps a single leading slash so the result stays a path.
    - Non-empty ``query`` is appended URL-encoded; empty or None adds nothing.

    Examples:
        >>> resolve_url("https://api.example.com/", "/users")
        'https://api.example.com/users'
        >>> resolve_url("", "users", {"page": "2"})
        '/users?page=2'
        >>> resolve_url("https://a.test", "https://b.test/x")
        'https://b.test/x'
    """
    if is_absolute_url(path):
        return _with_query(path, query)

    clean_path = path[1:] if path.startswith("/") else path
    if not base:
        return _with_query(f"/{clean_path}", query)

    clean_base = base[:-1] if base.endswith("/") else base
    return _with_query(f"{clean_base}/{clean_path}", query)
