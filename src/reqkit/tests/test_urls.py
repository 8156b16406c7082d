"""Tests for URL resolution."""

from __future__ import annotations

import pytest

from reqkit.http import is_absolute_url, resolve_url


@pytest.mark.parametrize("base", ["", "https://api.example.com", "https://api.example.com/v1/"])
@pytest.mark.parametrize("path", ["http://other.test/x", "https://other.test/y?z"])
def test_absolute_path_ignores_base(base: str, path: str) -> None:
    assert resolve_url(base, path) == path
    assert resolve_url(base, path, {"q": "1"}) == f"{path}?q=1"


@pytest.mark.parametrize(
    ("base", "path", "expected"),
    [
        ("https://api.example.com/", "/users", "https://api.example.com/users"),
        ("https://api.example.com", "/users", "https://api.example.com/users"),
        ("https://api.example.com/", "users", "https://api.example.com/users"),
        ("https://api.example.com", "users", "https://api.example.com/users"),
        ("https://api.example.com/v1/", "/a/b", "https://api.example.com/v1/a/b"),
    ],
)
def test_single_slash_at_join(base: str, path: str, expected: str) -> None:
    assert resolve_url(base, path) == expected
    assert "//" not in expected.split("://", 1)[1]


def test_only_one_slash_stripped() -> None:
    assert resolve_url("https://a.test//", "//p") == "https://a.test///p"


def test_empty_base_keeps_leading_slash() -> None:
    assert resolve_url("", "users") == "/users"
    assert resolve_url("", "/users") == "/users"
    assert resolve_url("", "") == "/"


def test_query_encoding() -> None:
    url = resolve_url("https://a.test", "/search", {"q": "hello world", "tag": "a&b"})
    assert url == "https://a.test/search?q=hello+world&tag=a%26b"


def test_empty_query_adds_nothing() -> None:
    assert resolve_url("https://a.test", "/x", {}) == "https://a.test/x"
    assert resolve_url("https://a.test", "/x", None) == "https://a.test/x"


def test_is_absolute_url() -> None:
    assert is_absolute_url("http://x")
    assert is_absolute_url("https://x")
    assert not is_absolute_url("ftp://x")
    assert not is_absolute_url("/x")
