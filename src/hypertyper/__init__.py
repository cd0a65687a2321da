# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
hypertyper package entrypoint.

A thin layer over httpx: a ClientFactory holds an immutable ClientConfig and
builds independent Clients, and every Client request returns an `Ok`/`Err`
result whose error side is a classified HTTPError. HTTP behavior is reached
through an injectable Transport so tests never need the network.
"""

from .auth import Auth
from .client import Client
from .config import ClientConfig, HttpSettings, load_client_config, load_http_settings
from .errors import (
    ConfigError,
    DecodeError,
    ErrorKind,
    HTTPError,
    RequestTimeout,
    SerializationError,
    StatusError,
    TransportError,
    classify_exception,
)
from .factory import ClientFactory
from .http import HttpRequest, HttpResponse, HttpxTransport, Method, Transport
from .log import setup_logging
from .result import Err, HTTPResult, Ok, Result
from .service import ClientService, HttpGet, HttpPost, HttpService
from .version import __version__

__all__ = [
    "Auth",
    "Client",
    "ClientConfig",
    "ClientFactory",
    "ClientService",
    "ConfigError",
    "DecodeError",
    "Err",
    "ErrorKind",
    "HTTPError",
    "HTTPResult",
    "HttpGet",
    "HttpPost",
    "HttpRequest",
    "HttpResponse",
    "HttpService",
    "HttpSettings",
    "HttpxTransport",
    "Method",
    "Ok",
    "RequestTimeout",
    "Result",
    "SerializationError",
    "StatusError",
    "Transport",
    "TransportError",
    "classify_exception",
    "load_client_config",
    "load_http_settings",
    "setup_logging",
    "__version__",
]
