"""Stateless helpers over status codes and normalized responses."""

from __future__ import annotations

import re
from typing import Literal

import orjson

from .models import NormalizedResponse, header_value

StatusCategory = Literal["success", "redirect", "client-error", "server-error", "unknown"]

_FILENAME = re.compile(r"""filename[^;=\n]*=((['"]).*?\2|[^;\n]*)""")


def is_success_status(status: int) -> bool:
    return 200 <= status < 300


def is_redirect(status: int) -> bool:
    return 300 <= status < 400


def is_client_error(status: int) -> bool:
    return 400 <= status < 500


def is_server_error(status: int) -> bool:
    return 500 <= status < 600


def status_category(status: int) -> StatusCategory:
    if is_success_status(status):
        return "success"
    if is_redirect(status):
        return "redirect"
    if is_client_error(status):
        return "client-error"
    if is_server_error(status):
        return "server-error"
    return "unknown"


def is_json_content(headers: dict[str, str]) -> bool:
    return "application/json" in (header_value(headers, "content-type") or "")


def parse_json(response: NormalizedResponse) -> object | None:
    """Best-effort JSON decode of the body.

    None unless the content type mentions application/json and the body
    parses.
    """
    if not is_json_content(response.headers):
        return None
    try:
        return orjson.loads(response.body)
    except orjson.JSONDecodeError:
        return None


def extract_filename(response: NormalizedResponse) -> str | None:
    """Filename from the Content-Disposition header, quotes stripped."""
    disposition = response.header("content-disposition")
    if not disposition:
        return None
    match = _FILENAME.search(disposition)
    if match and match.group(1):
        return match.group(1).replace('"', "").replace("'", "")
    return None
