# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Header normalization utilities.

HTTP header field names are case-insensitive (RFC 9110). Requests keep the spelling
the caller chose; responses are normalized to lowercase keys.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

_TOKEN_RE = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")


def _coerce_headers_mapping(headers: Any) -> Mapping[object, object] | None:
    """
    Best-effort coercion of "dict-like" header containers into a Mapping.

    Accepts plain dicts, httpx.Headers, objects exposing `.items()` and
    iterables of pairs.
    """
    if not headers:
        return None
    if isinstance(headers, Mapping):
        return headers

    items = getattr(headers, "items", None)
    if callable(items):
        return dict(items())

    return dict(headers)


def normalize_headers(headers: Mapping[object, object] | None) -> dict[str, str]:
    """Return a lowercase-keyed copy of a header mapping."""
    coerced = _coerce_headers_mapping(headers)
    if not coerced:
        return {}
    out: dict[str, str] = {}
    for key, value in coerced.items():
        if key is None:
            continue
        name = str(key).strip().lower()
        if not name:
            continue
        out[name] = "" if value is None else str(value)
    return out


def header_value(headers: Mapping[object, object] | None, name: str, default: str = "") -> str:
    """Return a header value using case-insensitive key matching."""
    if not headers or not name:
        return default

    coerced = _coerce_headers_mapping(headers)
    if not coerced:
        return default

    lower = str(name).lower()
    for key in (name, lower, lower.title()):
        if key in coerced:
            value = coerced.get(key)
            return default if value is None else str(value).strip()

    for key, value in coerced.items():
        if key is None:
            continue
        if str(key).lower() == lower:
            return default if value is None else str(value).strip()

    return default


def merge_headers(*layers: Mapping[str, str] | None) -> dict[str, str]:
    """
    Merge header mappings left to right.

    Names compare case-insensitively; the last layer that sets a name wins and
    its spelling of the name is kept.
    """
    merged: dict[str, tuple[str, str]] = {}
    for layer in layers:
        coerced = _coerce_headers_mapping(layer)
        if not coerced:
            continue
        for key, value in coerced.items():
            name = str(key)
            merged.pop(name.lower(), None)
            merged[name.lower()] = (name, str(value))
    return {name: value for name, value in merged.values()}


def invalid_header_reasons(headers: Mapping[str, str] | Iterable[tuple[str, str]] | None) -> list[str]:
    """Return human-readable problems with header names/values (empty when valid)."""
    coerced = _coerce_headers_mapping(headers)
    if not coerced:
        return []
    problems: list[str] = []
    for key, value in coerced.items():
        if not isinstance(key, str) or not _TOKEN_RE.match(key):
            problems.append(f"invalid header name {key!r}")
            continue
        if not isinstance(value, str):
            problems.append(f"header {key!r} must be a string, got {type(value).__name__}")
        elif "\r" in value or "\n" in value:
            problems.append(f"header {key!r} contains a line break")
    return problems


__all__ = ["header_value", "invalid_header_reasons", "merge_headers", "normalize_headers"]
