"""Tests for response normalization, models, and status/content helpers."""

from __future__ import annotations

import time
from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from reqkit.http import (
    NormalizedResponse,
    RequestDescriptor,
    extract_filename,
    normalize_response,
    parse_json,
    status_category,
)
from reqkit.io.transport import RawResponse
from reqkit.http.normalize import normalize_raw


def _response(status: int = 200, headers: dict[str, str] | None = None, body: str = "") -> NormalizedResponse:
    return normalize_response("https://a.test/x", status, "", headers or {}, body, time.monotonic())


# ─────────────────────────────────────────────────────────────────────────────
# Normalization
# ─────────────────────────────────────────────────────────────────────────────


def test_normalize_fields() -> None:
    started = time.monotonic() - 0.05
    resp = normalize_response("https://a.test/x", 201, "Created", {"X-Id": "1"}, "body", started)
    assert resp.url == "https://a.test/x"
    assert resp.status == 201 and resp.status_text == "Created"
    assert resp.headers == {"X-Id": "1"}
    assert resp.body == "body"
    assert resp.ok
    assert resp.duration_ms >= 50
    assert resp.timestamp.utcoffset() == timedelta(0)


def test_duration_clamped_for_future_start() -> None:
    resp = normalize_response("u", 200, "", {}, "", time.monotonic() + 60)
    assert resp.duration_ms == 0


@pytest.mark.parametrize(("status", "ok"), [(199, False), (200, True), (299, True), (300, False), (500, False)])
def test_ok_derives_from_status_only(status: int, ok: bool) -> None:
    assert _response(status).ok is ok


def test_status_out_of_range_rejected() -> None:
    with pytest.raises(ValidationError):
        _response(99)
    with pytest.raises(ValidationError):
        _response(600)


def test_normalize_raw() -> None:
    raw = RawResponse(status=404, status_text="Not Found", headers={"a": "b"}, body="nope")
    resp = normalize_raw("https://a.test", raw, time.monotonic())
    assert (resp.status, resp.status_text, resp.body) == (404, "Not Found", "nope")
    assert resp.is_client_error


def test_response_header_helpers() -> None:
    resp = _response(headers={"Content-Type": "application/json; charset=utf-8"})
    assert resp.header("content-type") == "application/json; charset=utf-8"
    assert resp.content_type == "application/json"
    assert resp.header("missing") is None


def test_response_is_frozen() -> None:
    resp = _response()
    with pytest.raises(ValidationError):
        resp.status = 500  # type: ignore[misc]


# ─────────────────────────────────────────────────────────────────────────────
# Descriptor
# ─────────────────────────────────────────────────────────────────────────────


def test_descriptor_defaults_and_method_normalization() -> None:
    d = RequestDescriptor(url="/x", method="post", body={"a": 1})
    assert d.method == "POST"
    assert d.has_body and d.has_structured_body
    assert RequestDescriptor(url="/x").method == "GET"
    assert not RequestDescriptor(url="/x", body="raw").has_structured_body


def test_descriptor_rejects_bad_values() -> None:
    with pytest.raises(ValidationError):
        RequestDescriptor(url="/x", method="TRACE")
    with pytest.raises(ValidationError):
        RequestDescriptor(url="/x", timeout_ms=0)


# ─────────────────────────────────────────────────────────────────────────────
# Functions
# ─────────────────────────────────────────────────────────────────────────────


@pytest.mark.parametrize(
    ("status", "category"),
    [(204, "success"), (302, "redirect"), (404, "client-error"), (503, "server-error"), (100, "unknown")],
)
def test_status_category(status: int, category: str) -> None:
    assert status_category(status) == category


def test_parse_json() -> None:
    json_headers = {"content-type": "application/json"}
    assert parse_json(_response(headers=json_headers, body='{"a":1}')) == {"a": 1}
    assert parse_json(_response(headers=json_headers, body="not json")) is None
    assert parse_json(_response(headers={"content-type": "text/plain"}, body='{"a":1}')) is None
    assert parse_json(_response(body='{"a":1}')) is None


@pytest.mark.parametrize(
    ("disposition", "expected"),
    [
        ('attachment; filename="report.pdf"', "report.pdf"),
        ("attachment; filename=data.csv", "data.csv"),
        ("inline", None),
    ],
)
def test_extract_filename(disposition: str, expected: str | None) -> None:
    assert extract_filename(_response(headers={"Content-Disposition": disposition})) == expected


def test_extract_filename_missing_header() -> None:
    assert extract_filename(_response()) is None


def test_timestamp_is_recent() -> None:
    assert (datetime.now(UTC) - _response().timestamp).total_seconds() < 5
