# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Two-variant result type returned by every client request.

Callers branch on the variant:

    result = client.get("/users/1")
    if isinstance(result, Ok):
        body = result.value
    elif isinstance(result.error, StatusError) and result.error.code == 404:
        ...

Both variants are dataclasses, so structural pattern matching
(`case Ok(body):` / `case Err(error):`) works as well.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, NoReturn, TypeVar, Union

from .errors import HTTPError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome wrapping the decoded payload."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: Any) -> T:  # noqa: ARG002
        return self.value

    def map(self, fn: Callable[[T], U]) -> Ok[U]:
        return Ok(fn(self.value))

    def and_then(self, fn: Callable[[T], Result[U]]) -> Result[U]:
        return fn(self.value)


@dataclass(frozen=True)
class Err:
    """Failed outcome carrying a classified HTTPError."""

    error: HTTPError

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        raise self.error

    def unwrap_or(self, default: U) -> U:
        return default

    def map(self, fn: Callable[[Any], Any]) -> Err:  # noqa: ARG002
        return self

    def and_then(self, fn: Callable[[Any], Any]) -> Err:  # noqa: ARG002
        return self


Result = Union[Ok[T], Err]
HTTPResult = Result

__all__ = ["Err", "HTTPResult", "Ok", "Result"]
