# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers.

Every failure a client call can hit is expressed as one of the `HTTPError`
subclasses below. `classify_exception` is the single place where httpx and
stdlib exceptions are mapped onto that taxonomy.
"""

from __future__ import annotations

import socket
import ssl
from collections.abc import Mapping
from enum import Enum
from typing import Any

import httpx


class ErrorKind(str, Enum):
    CONFIG = "CONFIG"
    TRANSPORT = "TRANSPORT"
    STATUS = "STATUS"
    TIMEOUT = "TIMEOUT"
    DECODE = "DECODE"
    SERIALIZATION = "SERIALIZATION"


class HTTPError(Exception):
    """Base class for every classified failure."""

    kind: ErrorKind

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "reason": self.reason}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.reason!r})"


class ConfigError(HTTPError):
    """Invalid client configuration or request options."""

    kind = ErrorKind.CONFIG


class TransportError(HTTPError):
    """Network, DNS, TLS or protocol level failure; no response was received."""

    kind = ErrorKind.TRANSPORT

    def __init__(self, reason: str, cause: BaseException | None = None):
        super().__init__(reason)
        self.cause = cause

    def __reduce__(self) -> tuple[Any, ...]:
        return (type(self), (self.reason, self.cause))

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["cause"] = type(self.cause).__name__ if self.cause is not None else None
        return data


class StatusError(HTTPError):
    """A well-formed HTTP response outside the 2xx range."""

    kind = ErrorKind.STATUS

    def __init__(
        self,
        code: int,
        body: bytes = b"",
        headers: Mapping[str, str] | None = None,
        url: str | None = None,
    ):
        super().__init__(f"Request returned HTTP {code}")
        self.code = code
        self.body = body
        self.headers = dict(headers or {})
        self.url = url

    def __reduce__(self) -> tuple[Any, ...]:
        return (type(self), (self.code, self.body, self.headers, self.url))

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update({"code": self.code, "body": self.text, "url": self.url})
        return data

    def __repr__(self) -> str:
        return f"StatusError(code={self.code}, body={self.body!r})"


class RequestTimeout(HTTPError):
    """No response arrived within the configured timeout."""

    kind = ErrorKind.TIMEOUT

    def __init__(self, timeout: float | None = None, reason: str | None = None):
        if reason is None:
            reason = f"No response within {timeout}s" if timeout is not None else "Request timed out"
        super().__init__(reason)
        self.timeout = timeout

    def __reduce__(self) -> tuple[Any, ...]:
        return (type(self), (self.timeout, self.reason))

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["timeout"] = self.timeout
        return data


class DecodeError(HTTPError):
    """The response body could not be decoded into the expected shape."""

    kind = ErrorKind.DECODE

    def __init__(self, reason: str, cause: BaseException | None = None):
        super().__init__(reason)
        self.cause = cause

    def __reduce__(self) -> tuple[Any, ...]:
        return (type(self), (self.reason, self.cause))


class SerializationError(HTTPError):
    """The request payload could not be serialized."""

    kind = ErrorKind.SERIALIZATION

    def __init__(self, reason: str, cause: BaseException | None = None):
        super().__init__(reason)
        self.cause = cause

    def __reduce__(self) -> tuple[Any, ...]:
        return (type(self), (self.reason, self.cause))


def classify_exception(exc: BaseException, *, timeout: float | None = None) -> HTTPError:
    """
    Map Python/httpx exceptions to an HTTPError variant.

    Already-classified errors pass through untouched. Anything unrecognised is
    reported as a transport failure so that nothing escapes unclassified.
    """
    if isinstance(exc, HTTPError):
        return exc

    # httpx.TimeoutException subclasses httpx.TransportError; check it first.
    if isinstance(exc, (httpx.TimeoutException, TimeoutError, socket.timeout)):
        return RequestTimeout(timeout=timeout)

    if isinstance(exc, httpx.DecodingError):
        return DecodeError(f"Could not decode response body: {exc}", cause=exc)

    if isinstance(exc, (ssl.SSLError, ssl.CertificateError)):
        return TransportError(f"TLS/certificate issue: {exc}", cause=exc)

    if isinstance(exc, (socket.gaierror, socket.herror)):
        return TransportError(f"DNS resolution failure: {exc}", cause=exc)

    if isinstance(exc, httpx.ConnectError):
        return TransportError(f"Could not connect: {exc}", cause=exc)

    if isinstance(exc, (httpx.TransportError, httpx.TooManyRedirects, httpx.StreamError, httpx.InvalidURL)):
        return TransportError(f"Error while making or processing an HTTP request: {exc}", cause=exc)

    if isinstance(exc, OSError):
        return TransportError(f"Network connectivity issue: {exc}", cause=exc)

    return TransportError(f"Unexpected {type(exc).__name__}: {exc}", cause=exc)


def error_kind_to_reason(kind: ErrorKind | None) -> str:
    """User-facing summary for an error kind."""
    mapping = {
        ErrorKind.CONFIG: "Invalid client configuration",
        ErrorKind.TRANSPORT: "Network connectivity issue",
        ErrorKind.STATUS: "Server returned an unsuccessful status",
        ErrorKind.TIMEOUT: "Network timeout",
        ErrorKind.DECODE: "Response body could not be decoded",
        ErrorKind.SERIALIZATION: "Request body could not be serialized",
        None: "",
    }
    return mapping.get(kind, "Request failed")


__all__ = [
    "ConfigError",
    "DecodeError",
    "ErrorKind",
    "HTTPError",
    "RequestTimeout",
    "SerializationError",
    "StatusError",
    "TransportError",
    "classify_exception",
    "error_kind_to_reason",
]
