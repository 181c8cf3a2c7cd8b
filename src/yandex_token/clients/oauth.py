from __future__ import annotations

from typing import Any, Dict, Mapping
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse

import httpx
from authlib.common.errors import AuthlibBaseError
from authlib.common.security import generate_token
from authlib.integrations.httpx_client import AsyncOAuth2Client
from authlib.oauth2.rfc6749.parameters import prepare_grant_uri


class OAuthClientError(Exception):
    def __init__(
        self,
        message: str,
        *,
        error: str | None = None,
        description: str | None = None,
        status_code: int | None = None,
        details: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.error = error
        self.description = description
        self.status_code = status_code
        self.details = dict(details or {})


class OAuthConfigurationError(OAuthClientError):
    """Raised when client configuration is incomplete."""


class OAuthTokenError(OAuthClientError):
    """Raised when the token endpoint returns an error."""


def validate_client_credentials(client_id: str | None, client_secret: str | None) -> None:
    if not client_id or not client_id.strip():
        raise OAuthConfigurationError("OAuth2 client requires a client_id option", error="configuration_error")
    if not client_secret or not client_secret.strip():
        raise OAuthConfigurationError("OAuth2 client requires a client_secret option", error="configuration_error")


class HttpOAuth2Client:
    """OAuth 2.0 client backed by Authlib's httpx integration."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        *,
        authorization_url: str,
        token_url: str,
        access_token_name: str = "access_token",
        use_authorization_header_for_get: bool = False,
        timeout: float = 10.0,
    ) -> None:
        validate_client_credentials(client_id, client_secret)
        self.client_id = client_id
        self._client_secret = client_secret
        self.authorization_url = authorization_url
        self.token_url = token_url
        self.access_token_name = access_token_name
        self.use_authorization_header_for_get = use_authorization_header_for_get
        self._timeout = timeout

    def _session(self, **kwargs: Any) -> AsyncOAuth2Client:
        return AsyncOAuth2Client(
            client_id=self.client_id,
            client_secret=self._client_secret,
            timeout=self._timeout,
            follow_redirects=True,
            **kwargs,
        )

    async def get(self, url: str, access_token: str) -> str:
        """GET ``url`` authenticated with ``access_token`` and return the raw body."""
        try:
            if self.use_authorization_header_for_get:
                token = {"access_token": access_token, "token_type": "bearer"}
                async with self._session(token=token) as client:
                    resp = await client.get(url)
            else:
                async with httpx.AsyncClient(timeout=self._timeout, follow_redirects=True) as client:
                    resp = await client.get(_append_query(url, {self.access_token_name: access_token}))
        except httpx.HTTPError as exc:
            raise OAuthClientError(
                "Network error during authenticated GET",
                error="network_error",
                description=str(exc),
            ) from exc

        if resp.status_code >= 300:
            raise OAuthClientError(
                "Authenticated GET failed",
                error=_error_code(_safe_json(resp)),
                status_code=resp.status_code,
                details={"data": resp.text},
            )
        return resp.text

    async def exchange_code(
        self,
        *,
        code: str,
        redirect_uri: str,
        code_verifier: str | None = None,
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {"code": code}
        if code_verifier:
            params["code_verifier"] = code_verifier
        try:
            async with self._session(redirect_uri=redirect_uri) as client:
                token = await client.fetch_token(self.token_url, grant_type="authorization_code", **params)
        except AuthlibBaseError as exc:
            raise OAuthTokenError(
                "Token exchange failed",
                error=exc.error,
                description=exc.description,
            ) from exc
        except httpx.HTTPError as exc:
            raise OAuthTokenError(
                "Network error during token exchange",
                error="network_error",
                description=str(exc),
                status_code=_status_code(exc),
            ) from exc
        return dict(token)

    async def refresh_access_token(self, refresh_token: str) -> Dict[str, Any]:
        if not refresh_token:
            raise OAuthTokenError("Missing refresh token", error="invalid_request")
        try:
            async with self._session() as client:
                token = await client.refresh_token(self.token_url, refresh_token=refresh_token)
        except AuthlibBaseError as exc:
            raise OAuthTokenError(
                "Token refresh failed",
                error=exc.error,
                description=exc.description,
            ) from exc
        except httpx.HTTPError as exc:
            raise OAuthTokenError(
                "Network error during token refresh",
                error="network_error",
                description=str(exc),
                status_code=_status_code(exc),
            ) from exc
        return dict(token)

    def build_authorization_url(
        self,
        *,
        redirect_uri: str,
        state: str | None = None,
        scope: str | None = None,
        extra_params: Mapping[str, Any] | None = None,
    ) -> tuple[str, str]:
        state = state or generate_token(48)
        url = prepare_grant_uri(
            self.authorization_url,
            client_id=self.client_id,
            response_type="code",
            redirect_uri=redirect_uri,
            scope=scope,
            state=state,
            **dict(extra_params or {}),
        )
        return url, state


def _append_query(url: str, params: Mapping[str, Any]) -> str:
    parsed = urlparse(url)
    query_params = parse_qsl(parsed.query, keep_blank_values=True)
    query_params.extend((str(k), str(v)) for k, v in params.items() if v is not None)
    new_query = urlencode(query_params, doseq=True)
    return urlunparse(parsed._replace(query=new_query))


def _safe_json(resp: httpx.Response) -> Dict[str, Any]:
    try:
        payload = resp.json()
    except ValueError:
        return {"raw": resp.text}
    return payload if isinstance(payload, dict) else {"raw": payload}


def _error_code(payload: Mapping[str, Any]) -> str | None:
    for key in ("error", "error_code", "code"):
        value = payload.get(key)
        if isinstance(value, str):
            return value
    return None


def _status_code(exc: httpx.HTTPError) -> int | None:
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code
    return None
