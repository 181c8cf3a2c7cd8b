from yandex_token.clients.oauth import (
    HttpOAuth2Client,
    OAuthClientError,
    OAuthConfigurationError,
    OAuthTokenError,
    validate_client_credentials,
)
from yandex_token.clients.types import OAuth2Client

__all__ = [
    "HttpOAuth2Client",
    "OAuth2Client",
    "OAuthClientError",
    "OAuthConfigurationError",
    "OAuthTokenError",
    "validate_client_credentials",
]
