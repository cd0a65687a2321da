# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Client factory: validates a ClientConfig once and builds clients from it."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .client import Client
from .config import ClientConfig, load_client_config, timeout_problem
from .errors import ConfigError
from .http.headers import invalid_header_reasons
from .http.transport import TransportFactory, create_default_transport
from .http.url import base_url_problem

logger = logging.getLogger(__name__)


def validate_config(config: ClientConfig) -> None:
    """Raise ConfigError describing every problem with `config`."""
    if not isinstance(config, ClientConfig):
        raise ConfigError(f"Expected ClientConfig, got {type(config).__name__}")

    problems: list[str] = []
    url_problem = base_url_problem(config.base_url)
    if url_problem:
        problems.append(url_problem)
    problem = timeout_problem(config.timeout)
    if problem:
        problems.append(problem)
    if isinstance(config.default_headers, Mapping):
        problems.extend(invalid_header_reasons(config.default_headers))
    else:
        problems.append(f"default_headers must be a mapping, got {type(config.default_headers).__name__}")
    if not isinstance(config.user_agent, str) or "\r" in config.user_agent or "\n" in config.user_agent:
        problems.append(f"invalid user_agent {config.user_agent!r}")
    if not isinstance(config.verify_tls, bool):
        problems.append(f"verify_tls must be a bool, got {type(config.verify_tls).__name__}")
    if not isinstance(config.follow_redirects, bool):
        problems.append(f"follow_redirects must be a bool, got {type(config.follow_redirects).__name__}")

    if problems:
        raise ConfigError("; ".join(problems))


class ClientFactory:
    """
    Holds a validated ClientConfig and manufactures Client instances.

    Validation happens once, in the constructor. `build()` then never fails, and
    every client it returns owns its own transport; clients built by the same
    factory share nothing but the immutable config.

    `transport_factory` receives the config and returns a Transport. It defaults
    to an httpx-backed transport; tests pass a fake instead.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        transport_factory: TransportFactory | None = None,
    ):
        config = config if config is not None else ClientConfig()
        validate_config(config)
        self._config = config
        self._transport_factory = transport_factory or create_default_transport

    @classmethod
    def with_user_agent(cls, user_agent: str, **config: Any) -> ClientFactory:
        """Factory whose clients identify themselves with `user_agent`."""
        transport_factory = config.pop("transport_factory", None)
        try:
            client_config = ClientConfig(user_agent=user_agent, **config)
        except (TypeError, ValueError) as exc:
            raise ConfigError(str(exc)) from None
        return cls(client_config, transport_factory=transport_factory)

    @classmethod
    def from_env(cls, *, transport_factory: TransportFactory | None = None, **overrides: Any) -> ClientFactory:
        """Factory built from HYPERTYPER_* environment variables plus explicit overrides."""
        try:
            client_config = load_client_config(**overrides)
        except TypeError as exc:
            raise ConfigError(str(exc)) from None
        return cls(client_config, transport_factory=transport_factory)

    @property
    def config(self) -> ClientConfig:
        return self._config

    def reconfigure(self, **changes: Any) -> ClientFactory:
        """Return a new factory with `changes` applied; this factory is left untouched."""
        try:
            config = self._config.replace(**changes)
        except TypeError as exc:
            raise ConfigError(str(exc)) from None
        return ClientFactory(config, transport_factory=self._transport_factory)

    def build(self) -> Client:
        """Create a new, independent client bound to this factory's config."""
        transport = self._transport_factory(self._config)
        logger.debug("Built client for %s", self._config.base_url or "<absolute URLs>")
        return Client(self._config, transport)

    def __repr__(self) -> str:
        return f"ClientFactory(base_url={self._config.base_url!r})"


__all__ = ["ClientFactory", "validate_config"]
