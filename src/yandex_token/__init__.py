"""Authenticate requests that carry a Yandex OAuth2 access token."""

from yandex_token.strategy import (
    CanonicalProfile,
    Error,
    ErrorKind,
    Failure,
    InternalOAuthError,
    StrategyOptions,
    Success,
    TokenRequest,
    VerifyResult,
    YandexTokenStrategy,
)

Strategy = YandexTokenStrategy

__all__ = [
    "CanonicalProfile",
    "Error",
    "ErrorKind",
    "Failure",
    "InternalOAuthError",
    "Strategy",
    "StrategyOptions",
    "Success",
    "TokenRequest",
    "VerifyResult",
    "YandexTokenStrategy",
]
