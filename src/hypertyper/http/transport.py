# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Transport capability and factory."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from ..config import ClientConfig
from .models import HttpRequest, HttpResponse


class Transport(Protocol):
    """
    Minimal capability for issuing HTTP requests.

    `issue` returns the response for any status code and raises on transport
    failure; callers classify the exception.
    """

    def issue(self, request: HttpRequest) -> HttpResponse: ...

    def close(self) -> None:  # pragma: no cover - optional for fakes
        ...


TransportFactory = Callable[[ClientConfig], Transport]


def create_default_transport(config: ClientConfig) -> Transport:
    """Factory for the default httpx-backed transport."""
    from .httpx_transport import HttpxTransport

    return HttpxTransport(config)


__all__ = ["Transport", "TransportFactory", "create_default_transport"]
