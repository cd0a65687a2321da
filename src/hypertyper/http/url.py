# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""URL helpers for base URL validation and request path resolution."""

from __future__ import annotations

from urllib.parse import urlsplit

_SCHEMES = {"http", "https"}


def is_absolute_url(value: str) -> bool:
    parts = urlsplit(str(value or ""))
    return parts.scheme.lower() in _SCHEMES and bool(parts.netloc)


def base_url_problem(base_url: str) -> str | None:
    """Return why `base_url` is unusable as a client base URL, or None when it is fine."""
    if base_url == "":
        return None
    if not isinstance(base_url, str):
        return f"base_url must be a string, got {type(base_url).__name__}"
    if base_url != base_url.strip() or any(ch.isspace() for ch in base_url):
        return f"base_url {base_url!r} contains whitespace"
    try:
        parts = urlsplit(base_url)
        port = parts.port
    except ValueError as exc:
        return f"base_url {base_url!r} is malformed: {exc}"
    if parts.scheme.lower() not in _SCHEMES:
        return f"base_url {base_url!r} must use http or https"
    if not parts.hostname:
        return f"base_url {base_url!r} has no host"
    if port == 0:
        return f"base_url {base_url!r} has an invalid port"
    if parts.query or parts.fragment:
        return f"base_url {base_url!r} must not carry a query or fragment"
    return None


def join_url(base_url: str, path: str) -> str:
    """
    Resolve a request path against the base URL.

    The base URL's path is kept as a prefix, matching how httpx treats `base_url`:
      https://host/v1 + /users -> https://host/v1/users
    Absolute http(s) URLs are returned unchanged.
    """
    raw_path = str(path or "")
    if is_absolute_url(raw_path):
        return raw_path
    if not base_url:
        raise ValueError(f"Relative path {raw_path!r} requires a base_url")
    if not raw_path:
        return base_url

    parts = urlsplit(base_url)
    prefix = parts.path.rstrip("/")
    if raw_path.startswith(("?", "#")):
        return parts._replace(path=prefix or "/").geturl() + raw_path
    joined_path = f"{prefix}/{raw_path.lstrip('/')}"
    root = parts._replace(path="", query="", fragment="").geturl()
    return root + joined_path


__all__ = ["base_url_problem", "is_absolute_url", "join_url"]
