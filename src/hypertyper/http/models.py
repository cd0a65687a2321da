# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request/response data models shared by clients and transports."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .headers import header_value, normalize_headers

Headers = dict[str, str]


class Method(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"

    @classmethod
    def parse(cls, value: str | Method) -> Method:
        """Return the Method for `value`, ignoring case; raises ValueError otherwise."""
        if isinstance(value, Method):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Unsupported HTTP method: {value!r}") from None


@dataclass
class HttpRequest:
    """Normalized request representation consumed by Transport implementations."""

    url: str
    method: Method = Method.GET
    headers: Headers = field(default_factory=dict)
    body: bytes | None = None
    timeout: float | None = None


@dataclass
class HttpResponse:
    """Normalized HTTP response returned by Transport implementations."""

    status_code: int
    headers: Headers = field(default_factory=dict)
    content: bytes = b""
    url: str | None = None
    encoding: str | None = None

    def __post_init__(self) -> None:
        self.headers = normalize_headers(self.headers)

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code <= 299

    @property
    def content_type(self) -> str:
        return header_value(self.headers, "content-type")

    @property
    def text(self) -> str:
        encoding = self.encoding or "utf-8"
        try:
            return self.content.decode(encoding, errors="replace")
        except LookupError:
            return self.content.decode("utf-8", errors="replace")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> HttpResponse:
        """Helper to normalize dictionary-like responses (e.g. recorded fixtures)."""
        raw_body = data.get("body")
        content: bytes = b""
        if isinstance(raw_body, (bytes, bytearray, memoryview)):
            content = bytes(raw_body)
        elif isinstance(raw_body, str):
            content = raw_body.encode("utf-8")
        elif raw_body is not None:
            raise TypeError(f"Unsupported body type: {type(raw_body).__name__}")

        return cls(
            status_code=int(data.get("status_code", 200)),
            headers=dict(data.get("headers") or {}),
            content=content,
            url=data.get("url"),
            encoding=data.get("encoding"),
        )


__all__ = ["Headers", "HttpRequest", "HttpResponse", "Method"]
