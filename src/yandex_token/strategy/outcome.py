from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, NamedTuple, Union

from yandex_token.strategy.errors import ErrorKind


class VerifyResult(NamedTuple):
    """What a verify function returns: a user (falsy to reject) and optional info."""

    user: Any
    info: Any = None


@dataclass(frozen=True)
class Success:
    user: Any
    info: Any = None


@dataclass(frozen=True)
class Failure:
    info: Any = None
    kind: ErrorKind = ErrorKind.VERIFICATION_REJECTED


@dataclass(frozen=True)
class Error:
    cause: BaseException
    kind: ErrorKind = ErrorKind.VERIFICATION_ERROR


AuthenticationResult = Union[Success, Failure, Error]


def complete(
    result: AuthenticationResult,
    *,
    success: Callable[[Any, Any], Any],
    fail: Callable[[Any], Any],
    error: Callable[[BaseException], Any],
) -> Any:
    """Route ``result`` to exactly one of the three handlers."""
    if isinstance(result, Success):
        return success(result.user, result.info)
    if isinstance(result, Failure):
        return fail(result.info)
    if isinstance(result, Error):
        return error(result.cause)
    raise TypeError(f"Unknown authentication result: {result!r}")
