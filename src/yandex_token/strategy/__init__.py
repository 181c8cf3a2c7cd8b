from yandex_token.strategy.core import StrategyOptions, VerifyFunction, YandexTokenStrategy
from yandex_token.strategy.errors import ErrorKind, InternalOAuthError
from yandex_token.strategy.extract import Credentials, TokenRequest, extract_credentials, extract_token
from yandex_token.strategy.outcome import AuthenticationResult, Error, Failure, Success, VerifyResult, complete
from yandex_token.strategy.profile import (
    CanonicalProfile,
    MalformedProfileError,
    ProfileEmail,
    ProfileName,
    parse_profile,
)

__all__ = [
    "AuthenticationResult",
    "CanonicalProfile",
    "Credentials",
    "Error",
    "ErrorKind",
    "Failure",
    "InternalOAuthError",
    "MalformedProfileError",
    "ProfileEmail",
    "ProfileName",
    "StrategyOptions",
    "Success",
    "TokenRequest",
    "VerifyFunction",
    "VerifyResult",
    "YandexTokenStrategy",
    "complete",
    "extract_credentials",
    "extract_token",
    "parse_profile",
]
