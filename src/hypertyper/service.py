# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
HTTP services: the seam API clients depend on.

A "service" is a proxy for a remote HTTP server. API clients take any object
satisfying `HttpService` so that production code can use `ClientService`
(backed by a real `Client`) while tests pass a `FixtureService` or another fake
that returns canned responses without touching the network:

    class WeatherAPI:
        def __init__(self, service: HttpService):
            self._service = service

        @classmethod
        def create(cls) -> "WeatherAPI":
            factory = ClientFactory.with_user_agent("weather/1.0", base_url="https://api.example")
            return cls(ClientService(factory.build()))

    # tests
    api = WeatherAPI(FixtureService("tests/data/output"))
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from .auth import Auth
from .client import Client, Decoder
from .factory import ClientFactory
from .result import HTTPResult


@runtime_checkable
class HttpGet(Protocol):
    """A service that makes GET requests."""

    def get(self, uri: str) -> HTTPResult[str]:
        """GET `uri` and return the raw body as text."""
        ...


@runtime_checkable
class HttpPost(Protocol):
    """A service that makes POST requests with JSON bodies."""

    def post(self, uri: str, auth: Auth | None, data: Any, *, decoder: Decoder | None = None) -> HTTPResult[Any]:
        """POST `data` as JSON to `uri` and decode the JSON response."""
        ...


@runtime_checkable
class HttpService(HttpGet, HttpPost, Protocol):
    """A service for both GET and POST; any object with both methods qualifies."""


class ClientService:
    """HttpService backed by a live Client."""

    def __init__(self, client: Client):
        self._client = client

    @classmethod
    def from_factory(cls, factory: ClientFactory) -> ClientService:
        return cls(factory.build())

    @property
    def client(self) -> Client:
        return self._client

    def get(self, uri: str) -> HTTPResult[str]:
        return self._client.get_text(uri)

    def post(self, uri: str, auth: Auth | None, data: Any, *, decoder: Decoder | None = None) -> HTTPResult[Any]:
        return self._client.post_json(uri, data, decoder=decoder, auth=auth)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> ClientService:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()


__all__ = ["ClientService", "HttpGet", "HttpPost", "HttpService"]
