# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Testing utilities for code built on hypertyper.

`StubTransport` is a programmable Transport for exercising a real `Client`
without network I/O. `FixtureService` is an `HttpService` that answers from
files on disk, and `TestDataLoader` loads JSON fixtures used as request data.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import httpx

from .auth import Auth
from .client import Decoder
from .config import ClientConfig
from .errors import DecodeError
from .http.models import HttpRequest, HttpResponse, Method
from .http.transport import TransportFactory
from .result import Err, HTTPResult, Ok

StubOutcome = HttpResponse | BaseException | Mapping[str, Any]


class StubTransport:
    """
    Deterministic, programmable Transport for tests; records every request.

    Outcomes are `HttpResponse` objects, exceptions to raise, or recorded
    responses as mappings (`status_code`, `headers`, `body`, `url`).
    """

    def __init__(self, responses: dict[str, StubOutcome] | None = None):
        self._responses: dict[tuple[Method | None, str], HttpResponse | BaseException] = {
            (None, url): self._coerce(outcome) for url, outcome in (responses or {}).items()
        }
        self.requests: list[HttpRequest] = []
        self.closed = False

    def add(self, url: str, outcome: StubOutcome, *, method: str | Method | None = None) -> None:
        """Answer requests to `url` (optionally only for `method`) with a response or exception."""
        key_method = Method.parse(method) if method is not None else None
        self._responses[(key_method, url)] = self._coerce(outcome)

    @staticmethod
    def _coerce(outcome: StubOutcome) -> HttpResponse | BaseException:
        if isinstance(outcome, Mapping):
            return HttpResponse.from_mapping(outcome)
        return outcome

    def issue(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        outcome = self._responses.get((request.method, request.url))
        if outcome is None:
            outcome = self._responses.get((None, request.url))
        if outcome is None:
            raise httpx.ConnectError(f"No stubbed response configured for {request.method.value} {request.url}")
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    def close(self) -> None:
        self.closed = True

    def as_factory(self) -> TransportFactory:
        """TransportFactory that hands out this stub to every built client."""

        def factory(config: ClientConfig) -> StubTransport:  # noqa: ARG001
            return self

        return factory


class FixtureService:
    """
    HttpService answering from files under `root`.

    A request for `/users/foo/about` loads `<root>/users/foo/about.<ext>`.
    GET returns the trimmed file contents; POST ignores `auth` and `data` and
    decodes the file as JSON.
    """

    def __init__(self, root: str | Path, ext: str = "json"):
        self.root = str(root)
        self.ext = ext

    def resource_path(self, uri: str) -> Path:
        return Path(f"{self.root}{uri}.{self.ext}")

    def _load_resource(self, uri: str) -> str:
        path = self.resource_path(uri)
        if not path.is_file():
            raise FileNotFoundError(f"could not find test data at {path}")
        return path.read_text(encoding="utf-8")

    def get(self, uri: str) -> HTTPResult[str]:
        return Ok(self._load_resource(uri).strip())

    def post(self, uri: str, auth: Auth | None, data: Any, *, decoder: Decoder | None = None) -> HTTPResult[Any]:  # noqa: ARG002
        raw = self._load_resource(uri)
        try:
            payload = json.loads(raw)
        except ValueError as exc:
            return Err(DecodeError(f"Invalid JSON fixture {self.resource_path(uri)}: {exc}", cause=exc))
        if decoder is None:
            return Ok(payload)
        try:
            return Ok(decoder(payload))
        except Exception as exc:  # noqa: BLE001
            return Err(DecodeError(f"Could not decode fixture into expected type: {exc}", cause=exc))


class TestDataLoader:
    """Loads `<root>/<name>.json` fixtures, optionally converting them with `decoder`."""

    __test__ = False

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def load(self, name: str, decoder: Decoder | None = None) -> Any:
        path = self.root / f"{name}.json"
        data = json.loads(path.read_text(encoding="utf-8"))
        return decoder(data) if decoder is not None else data


__all__ = ["FixtureService", "StubOutcome", "StubTransport", "TestDataLoader"]
