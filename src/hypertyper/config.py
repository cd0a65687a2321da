# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for hypertyper."""

from __future__ import annotations

import math
import os
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from types import MappingProxyType
from typing import Any

from .version import __version__

DEFAULT_USER_AGENT = f"hypertyper v{__version__}"
DEFAULT_TIMEOUT = 10.0


def _float_env(name: str, default: float | None) -> float | None:
    try:
        value = os.getenv(name)
        if value is None:
            return default
        if value.strip().lower() in {"none", "off"}:
            return None
        return float(value)
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def timeout_problem(timeout: Any) -> str | None:
    """Return why `timeout` is not a usable timeout in seconds, or None when it is fine."""
    if timeout is None:
        return None
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
        return f"timeout must be a number of seconds, got {type(timeout).__name__}"
    if math.isnan(timeout) or math.isinf(timeout):
        return f"timeout must be finite, got {timeout}"
    if timeout < 0:
        return f"timeout must not be negative, got {timeout}"
    return None


@dataclass
class HttpSettings:
    """HTTP client defaults."""

    base_url: str = ""
    timeout: float | None = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    allow_redirects: bool = True
    verify_ssl: bool = True

    @classmethod
    def from_env(cls) -> HttpSettings:
        """Create settings from environment variables (evaluated at call time)."""
        return cls(
            base_url=os.getenv("HYPERTYPER_BASE_URL", cls.base_url),
            timeout=_float_env("HYPERTYPER_HTTP_TIMEOUT", cls.timeout),
            user_agent=os.getenv("HYPERTYPER_USER_AGENT", cls.user_agent),
            allow_redirects=_bool_env("HYPERTYPER_HTTP_REDIRECTS", cls.allow_redirects),
            verify_ssl=_bool_env("HYPERTYPER_HTTP_VERIFY_SSL", cls.verify_ssl),
        )


def load_http_settings() -> HttpSettings:
    """Load HTTP settings from environment with sensible defaults."""
    return HttpSettings.from_env()


@dataclass(frozen=True)
class ClientConfig:
    """
    Immutable bundle of client construction parameters.

    `default_headers` is copied into a read-only mapping, so a config can be shared
    between any number of clients. Use `replace()` to derive a modified config.
    """

    base_url: str = ""
    default_headers: Mapping[str, str] = field(default_factory=dict, hash=False)
    timeout: float | None = DEFAULT_TIMEOUT
    verify_tls: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    follow_redirects: bool = True

    def __post_init__(self) -> None:
        headers = self.default_headers if self.default_headers is not None else {}
        # Non-mapping values are kept as given and reported by validate_config().
        if isinstance(headers, Mapping):
            headers = MappingProxyType(dict(headers))
        object.__setattr__(self, "default_headers", headers)

    @classmethod
    def from_settings(cls, settings: HttpSettings, **overrides: Any) -> ClientConfig:
        values: dict[str, Any] = {
            "base_url": settings.base_url,
            "timeout": settings.timeout,
            "verify_tls": settings.verify_ssl,
            "user_agent": settings.user_agent,
            "follow_redirects": settings.allow_redirects,
        }
        values.update(overrides)
        return cls(**values)

    def replace(self, **changes: Any) -> ClientConfig:
        """Return a copy of this config with `changes` applied."""
        unknown = set(changes) - {f.name for f in fields(self)}
        if unknown:
            raise TypeError(f"Unknown ClientConfig field(s): {', '.join(sorted(unknown))}")
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "base_url": self.base_url,
            "default_headers": dict(self.default_headers),
            "timeout": self.timeout,
            "verify_tls": self.verify_tls,
            "user_agent": self.user_agent,
            "follow_redirects": self.follow_redirects,
        }


def load_client_config(**overrides: Any) -> ClientConfig:
    """Build a ClientConfig from environment-backed HttpSettings."""
    return ClientConfig.from_settings(load_http_settings(), **overrides)


__all__ = [
    "DEFAULT_TIMEOUT",
    "DEFAULT_USER_AGENT",
    "ClientConfig",
    "HttpSettings",
    "load_client_config",
    "load_http_settings",
    "timeout_problem",
]
