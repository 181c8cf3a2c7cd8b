from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Mapping, Optional
from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator

from yandex_token.clients.oauth import HttpOAuth2Client, validate_client_credentials
from yandex_token.clients.types import OAuth2Client
from yandex_token.settings import Settings, get_settings
from yandex_token.strategy.errors import ErrorKind, classify_error, wrap_fetch_error
from yandex_token.strategy.extract import extract_credentials
from yandex_token.strategy.outcome import AuthenticationResult, Error, Failure, Success
from yandex_token.strategy.profile import CanonicalProfile, parse_profile

logger = logging.getLogger(__name__)

VerifyFunction = Callable[..., Any]


class StrategyOptions(BaseModel):
    """Construction-time options, read-only once the strategy exists."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    client_id: str = ""
    client_secret: str = ""
    authorization_url: str = "https://oauth.yandex.ru/authorize"
    token_url: str = "https://oauth.yandex.ru/token"
    profile_url: str = "https://login.yandex.ru/info?format=json"
    access_token_field: str = "access_token"
    refresh_token_field: str = "refresh_token"
    pass_req_to_callback: bool = False
    access_token_name: str = "oauth_token"
    use_authorization_header_for_get: bool = True
    timeout: float = 10.0

    @field_validator("authorization_url", "token_url", "profile_url", mode="before")
    @classmethod
    def _default_url(cls, value: Any, info: ValidationInfo) -> Any:
        return value or cls.model_fields[info.field_name].default

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "StrategyOptions":
        s = settings or get_settings()
        return cls(**s.strategy.model_dump())


class YandexTokenStrategy:
    """Authenticate requests carrying a Yandex OAuth2 access token.

    The token is looked up in the request body, query string and headers (in
    that order), used to fetch the Yandex profile, and handed to ``verify``
    together with the refresh token::

        async def verify(access_token, refresh_token, profile):
            user = await users.find_or_create(yandex_id=profile.id)
            return VerifyResult(user, {"scope": "read"})

    ``verify`` may be sync or async and returns a user, or a ``(user, info)``
    pair such as ``VerifyResult``. It rejects by returning a falsy user and
    signals an internal error by raising. With ``pass_req_to_callback`` the
    request is passed as the first argument.
    """

    name = "yandex-token"

    def __init__(
        self,
        options: StrategyOptions | Mapping[str, Any] | None = None,
        verify: VerifyFunction | None = None,
        *,
        oauth2: OAuth2Client | None = None,
    ) -> None:
        if options is None:
            options = StrategyOptions()
        elif not isinstance(options, StrategyOptions):
            options = StrategyOptions(**options)

        validate_client_credentials(options.client_id, options.client_secret)
        if not callable(verify):
            raise TypeError("YandexTokenStrategy requires a verify callback")

        self.options = options
        self._verify = verify
        self._oauth2: OAuth2Client = oauth2 or HttpOAuth2Client(
            options.client_id,
            options.client_secret,
            authorization_url=options.authorization_url,
            token_url=options.token_url,
            access_token_name=options.access_token_name,
            use_authorization_header_for_get=options.use_authorization_header_for_get,
            timeout=options.timeout,
        )

    @property
    def oauth2(self) -> OAuth2Client:
        return self._oauth2

    async def user_profile(self, access_token: str) -> CanonicalProfile:
        """Fetch and normalize the profile that ``access_token`` belongs to.

        Raises:
            InternalOAuthError: any failure raised by the OAuth2 client,
                e.g. an unreachable endpoint or a non-2xx status.
            json.JSONDecodeError: the body is not JSON.
            MalformedProfileError: the body is JSON but not a profile.
        """
        try:
            body = await self._oauth2.get(self.options.profile_url, access_token)
        except Exception as exc:
            raise wrap_fetch_error(exc) from exc
        return parse_profile(body)

    async def authenticate(self, request: Any) -> AuthenticationResult:
        opts = self.options
        access_token, refresh_token = extract_credentials(
            request, opts.access_token_field, opts.refresh_token_field
        )
        if not access_token:
            self._log("fail", ErrorKind.MISSING_CREDENTIAL)
            return Failure(
                {"message": f"You should provide {opts.access_token_field}"},
                kind=ErrorKind.MISSING_CREDENTIAL,
            )

        try:
            profile = await self.user_profile(access_token)
        except Exception as exc:
            kind = classify_error(exc)
            self._log("error", kind, level=logging.WARNING)
            return Error(exc, kind=kind)

        if opts.pass_req_to_callback:
            args: tuple = (request, access_token, refresh_token, profile)
        else:
            args = (access_token, refresh_token, profile)

        try:
            verified = self._verify(*args)
            if inspect.isawaitable(verified):
                verified = await verified
        except Exception as exc:
            self._log("error", ErrorKind.VERIFICATION_ERROR, level=logging.WARNING)
            return Error(exc, kind=ErrorKind.VERIFICATION_ERROR)

        user, info = _unpack(verified)
        if not user:
            self._log("fail", ErrorKind.VERIFICATION_REJECTED)
            return Failure(info, kind=ErrorKind.VERIFICATION_REJECTED)

        self._log("success")
        return Success(user, info)

    def _log(self, outcome: str, kind: ErrorKind | None = None, level: int = logging.INFO) -> None:
        logger.log(
            level,
            "authentication %s",
            outcome,
            extra={"strategy": self.name, "outcome": outcome, "kind": kind.value if kind else None},
        )


def _unpack(verified: Any) -> tuple[Any, Any]:
    """Split a verify return value into ``(user, info)``.

    Any 2-tuple, ``VerifyResult`` included, is read as ``(user, info)``;
    every other value is the user itself with no info.
    """
    if isinstance(verified, tuple) and len(verified) == 2:
        user, info = verified
        return user, info
    return verified, None
