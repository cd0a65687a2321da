# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Client bound to an immutable ClientConfig.

Every request method returns an `Ok`/`Err` result. Failures raised by the
transport, invalid per-request options and undecodable bodies are all
classified into an `HTTPError` before they leave this module.
"""

from __future__ import annotations

import dataclasses
import json
import logging
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from .auth import Auth
from .config import ClientConfig, timeout_problem
from .errors import ConfigError, DecodeError, SerializationError, StatusError, classify_exception
from .http.headers import invalid_header_reasons, merge_headers
from .http.models import HttpRequest, HttpResponse, Method
from .http.transport import Transport
from .http.url import join_url
from .result import Err, HTTPResult, Ok

logger = logging.getLogger(__name__)

R = TypeVar("R")
Decoder = Callable[[Any], R]

JSON_CONTENT_TYPE = "application/json"


def _json_default(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def encode_json(data: Any) -> HTTPResult[bytes]:
    """Serialize `data` to a UTF-8 JSON body."""
    try:
        return Ok(json.dumps(data, default=_json_default).encode("utf-8"))
    except (TypeError, ValueError) as exc:
        return Err(SerializationError(f"Error serializing request body: {exc}", cause=exc))


def is_json_content_type(content_type: str) -> bool:
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == JSON_CONTENT_TYPE or media_type.endswith("+json")


def decode_json(response: HttpResponse, decoder: Decoder | None = None) -> HTTPResult[Any]:
    """Decode a JSON response body, checking its Content-Type first."""
    content_type = response.content_type
    if not content_type:
        return Err(DecodeError("Missing Content-Type header"))
    if not is_json_content_type(content_type):
        return Err(DecodeError(f"Unexpected content type: {content_type}"))
    try:
        data = json.loads(response.content)
    except ValueError as exc:
        return Err(DecodeError(f"Invalid JSON body: {exc}", cause=exc))
    if decoder is None:
        return Ok(data)
    try:
        return Ok(decoder(data))
    except Exception as exc:  # noqa: BLE001
        return Err(DecodeError(f"Could not decode JSON into expected type: {exc}", cause=exc))


def decode_text(response: HttpResponse) -> HTTPResult[str]:
    """Decode a response body as text using its declared charset (UTF-8 by default)."""
    encoding = response.encoding or "utf-8"
    try:
        return Ok(response.content.decode(encoding))
    except LookupError:
        encoding = "utf-8"
    except UnicodeDecodeError as exc:
        return Err(DecodeError(f"Response body is not valid {encoding}: {exc}", cause=exc))
    try:
        return Ok(response.content.decode(encoding))
    except UnicodeDecodeError as exc:
        return Err(DecodeError(f"Response body is not valid {encoding}: {exc}", cause=exc))


class Client:
    """Issues requests with a bound configuration and returns unified results."""

    def __init__(self, config: ClientConfig, transport: Transport):
        self._config = config
        self._transport = transport

    @property
    def config(self) -> ClientConfig:
        return self._config

    def prepare(
        self,
        method: str | Method,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: bytes | str | None = None,
        timeout: float | None = None,
        auth: Auth | None = None,
    ) -> HttpRequest:
        """
        Build the effective request: config defaults merged with per-request options.

        Raises ConfigError for unsupported methods, unresolvable paths and invalid
        header, body or timeout values.
        """
        try:
            parsed_method = Method.parse(method)
        except ValueError as exc:
            raise ConfigError(str(exc)) from None

        try:
            url = join_url(self._config.base_url, path)
        except ValueError as exc:
            raise ConfigError(str(exc)) from None

        problems = invalid_header_reasons(headers)
        if problems:
            raise ConfigError("; ".join(problems))

        problem = timeout_problem(timeout)
        if problem:
            raise ConfigError(problem)

        if isinstance(body, str):
            payload: bytes | None = body.encode("utf-8")
        elif isinstance(body, (bytes, bytearray, memoryview)):
            payload = bytes(body)
        elif body is None:
            payload = None
        else:
            raise ConfigError(f"body must be bytes or str, got {type(body).__name__}")

        merged = merge_headers(
            {"User-Agent": self._config.user_agent},
            self._config.default_headers,
            headers,
            auth.headers() if auth is not None else None,
        )
        return HttpRequest(
            url=url,
            method=parsed_method,
            headers=merged,
            body=payload,
            timeout=timeout if timeout is not None else self._config.timeout,
        )

    def send(self, method: str | Method, path: str, **options: Any) -> HTTPResult[HttpResponse]:
        """Issue a request and return the full 2xx response, or a classified error."""
        try:
            request = self.prepare(method, path, **options)
        except ConfigError as exc:
            return Err(exc)
        except (TypeError, ValueError) as exc:
            return Err(ConfigError(f"Invalid request options: {exc}"))

        try:
            response = self._transport.issue(request)
        except Exception as exc:  # noqa: BLE001
            error = classify_exception(exc, timeout=request.timeout)
            logger.debug("%s %s failed: %s", request.method.value, request.url, error.kind.value)
            return Err(error)

        if not response.is_success:
            logger.debug("%s %s returned HTTP %s", request.method.value, request.url, response.status_code)
            return Err(
                StatusError(
                    response.status_code,
                    body=response.content,
                    headers=response.headers,
                    url=response.url or request.url,
                )
            )
        return Ok(response)

    def request(self, method: str | Method, path: str, **options: Any) -> HTTPResult[bytes]:
        """Issue a request; `Ok` wraps the 2xx response body unchanged."""
        return self.send(method, path, **options).map(lambda response: response.content)

    def get(self, path: str, **options: Any) -> HTTPResult[bytes]:
        return self.request(Method.GET, path, **options)

    def post(self, path: str, **options: Any) -> HTTPResult[bytes]:
        return self.request(Method.POST, path, **options)

    def put(self, path: str, **options: Any) -> HTTPResult[bytes]:
        return self.request(Method.PUT, path, **options)

    def patch(self, path: str, **options: Any) -> HTTPResult[bytes]:
        return self.request(Method.PATCH, path, **options)

    def delete(self, path: str, **options: Any) -> HTTPResult[bytes]:
        return self.request(Method.DELETE, path, **options)

    def head(self, path: str, **options: Any) -> HTTPResult[bytes]:
        return self.request(Method.HEAD, path, **options)

    def options(self, path: str, **options: Any) -> HTTPResult[bytes]:
        return self.request(Method.OPTIONS, path, **options)

    def get_text(self, path: str, **options: Any) -> HTTPResult[str]:
        """GET `path` and return the body as text."""
        return self.send(Method.GET, path, **options).and_then(decode_text)

    def request_json(
        self,
        method: str | Method,
        path: str,
        data: Any = None,
        *,
        decoder: Decoder | None = None,
        **options: Any,
    ) -> HTTPResult[Any]:
        """
        Issue a JSON request and decode the JSON response.

        `data`, when given, is serialized as the request body. `decoder` converts
        the parsed JSON into the caller's type; any exception it raises becomes a
        DecodeError.
        """
        json_headers = {"Accept": JSON_CONTENT_TYPE}
        if data is not None:
            encoded = encode_json(data)
            if isinstance(encoded, Err):
                return encoded
            options["body"] = encoded.value
            json_headers["Content-Type"] = JSON_CONTENT_TYPE
        try:
            options["headers"] = merge_headers(json_headers, options.get("headers"))
        except (TypeError, ValueError) as exc:
            return Err(ConfigError(f"Invalid request options: {exc}"))
        return self.send(method, path, **options).and_then(lambda response: decode_json(response, decoder))

    def get_json(self, path: str, *, decoder: Decoder | None = None, **options: Any) -> HTTPResult[Any]:
        return self.request_json(Method.GET, path, decoder=decoder, **options)

    def post_json(self, path: str, data: Any, *, decoder: Decoder | None = None, **options: Any) -> HTTPResult[Any]:
        return self.request_json(Method.POST, path, data, decoder=decoder, **options)

    def put_json(self, path: str, data: Any, *, decoder: Decoder | None = None, **options: Any) -> HTTPResult[Any]:
        return self.request_json(Method.PUT, path, data, decoder=decoder, **options)

    def patch_json(self, path: str, data: Any, *, decoder: Decoder | None = None, **options: Any) -> HTTPResult[Any]:
        return self.request_json(Method.PATCH, path, data, decoder=decoder, **options)

    def close(self) -> None:
        close = getattr(self._transport, "close", None)
        if callable(close):
            close()

    def __enter__(self) -> Client:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()


__all__ = ["Client", "decode_json", "decode_text", "encode_json", "is_json_content_type"]
