# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""API credentials."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Auth:
    """An API key sent as a bearer token."""

    api_key: str = field(repr=False)
    scheme: str = "Bearer"

    def header_value(self) -> str:
        return f"{self.scheme} {self.api_key}"

    def headers(self) -> dict[str, str]:
        return {"Authorization": self.header_value()}


__all__ = ["Auth"]
