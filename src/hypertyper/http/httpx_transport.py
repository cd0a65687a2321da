# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed Transport implementation."""

from __future__ import annotations

import logging
import time

import httpx

from ..config import ClientConfig
from .models import HttpRequest, HttpResponse

logger = logging.getLogger(__name__)


class HttpxTransport:
    """
    Synchronous httpx client wrapper; one instance owns one connection pool.

    httpx applies a timeout to each network operation separately, so a server
    trickling bytes could keep a request alive far past its timeout. The body is
    therefore streamed and the request's timeout is also enforced as a total
    deadline, raising `httpx.ReadTimeout` once it has passed.
    """

    def __init__(self, config: ClientConfig | None = None, client: httpx.Client | None = None):
        self.config = config or ClientConfig()
        self._client = client or httpx.Client(
            follow_redirects=self.config.follow_redirects,
            timeout=self.config.timeout,
            verify=self.config.verify_tls,
        )

    def issue(self, request: HttpRequest) -> HttpResponse:
        logger.debug("%s %s (timeout=%s)", request.method.value, request.url, request.timeout)
        deadline = time.monotonic() + request.timeout if request.timeout is not None else None
        with self._client.stream(
            request.method.value,
            request.url,
            headers=request.headers,
            content=request.body,
            timeout=httpx.Timeout(request.timeout),
        ) as resp:
            chunks: list[bytes] = []
            self._check_deadline(deadline, request, resp)
            for chunk in resp.iter_bytes():
                chunks.append(chunk)
                self._check_deadline(deadline, request, resp)
            return HttpResponse(
                status_code=resp.status_code,
                headers=dict(resp.headers),
                content=b"".join(chunks),
                url=str(resp.url),
                encoding=resp.encoding,
            )

    @staticmethod
    def _check_deadline(deadline: float | None, request: HttpRequest, resp: httpx.Response) -> None:
        if deadline is not None and time.monotonic() > deadline:
            logger.debug("Deadline of %ss exceeded for %s", request.timeout, request.url)
            raise httpx.ReadTimeout(
                f"Response not complete within {request.timeout}s",
                request=resp.request,
            )

    def close(self) -> None:
        self._client.close()


__all__ = ["HttpxTransport"]
