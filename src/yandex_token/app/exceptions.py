from __future__ import annotations

import json

import httpx
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from yandex_token.clients.oauth import OAuthClientError
from yandex_token.strategy.errors import InternalOAuthError
from yandex_token.strategy.profile import MalformedProfileError


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(InternalOAuthError)
    async def profile_fetch_error_handler(_, exc: InternalOAuthError):
        return JSONResponse(
            status_code=502,
            content={"detail": exc.message, "status_code": exc.status_code},
        )

    @app.exception_handler(json.JSONDecodeError)
    @app.exception_handler(MalformedProfileError)
    async def malformed_profile_handler(_, __: ValueError):
        return JSONResponse(status_code=502, content={"detail": "Malformed profile response"})

    @app.exception_handler(OAuthClientError)
    async def oauth_client_error_handler(_, exc: OAuthClientError):
        return JSONResponse(status_code=502, content={"detail": str(exc), "error": exc.error})

    @app.exception_handler(httpx.HTTPError)
    async def httpx_error_handler(_, exc: httpx.HTTPError):
        return JSONResponse(status_code=502, content={"detail": f"External API error: {str(exc)}"})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(_, __: Exception):
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})
