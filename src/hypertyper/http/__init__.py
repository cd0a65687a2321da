# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP transport exports."""

from .headers import header_value, merge_headers, normalize_headers
from .httpx_transport import HttpxTransport
from .models import Headers, HttpRequest, HttpResponse, Method
from .transport import Transport, TransportFactory, create_default_transport
from .url import base_url_problem, is_absolute_url, join_url

__all__ = [
    "Headers",
    "HttpRequest",
    "HttpResponse",
    "HttpxTransport",
    "Method",
    "Transport",
    "TransportFactory",
    "base_url_problem",
    "create_default_transport",
    "header_value",
    "is_absolute_url",
    "join_url",
    "merge_headers",
    "normalize_headers",
]
