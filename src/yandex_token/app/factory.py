from __future__ import annotations

from fastapi import FastAPI

from yandex_token.api import auth_router, system_router
from yandex_token.api.auth import default_verify
from yandex_token.app.exceptions import register_exception_handlers
from yandex_token.app.logging_config import configure_logging
from yandex_token.clients.types import OAuth2Client
from yandex_token.middleware.request_id import RequestIDMiddleware
from yandex_token.settings import get_settings
from yandex_token.strategy import StrategyOptions, VerifyFunction, YandexTokenStrategy


def create_app(
    verify: VerifyFunction | None = None,
    *,
    options: StrategyOptions | None = None,
    oauth2: OAuth2Client | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        verify: Verify function handed to the strategy; defaults to
            accepting the Yandex profile as the user.
        options: Strategy options; read from settings when omitted.
        oauth2: OAuth2 client override, mostly for tests.

    Returns:
        Configured FastAPI application instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Yandex OAuth2 access token authentication",
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        debug=settings.server.debug,
    )

    app.state.strategy = YandexTokenStrategy(
        options or StrategyOptions.from_settings(settings),
        verify or default_verify,
        oauth2=oauth2,
    )

    # Routers
    app.include_router(system_router)
    app.include_router(auth_router)

    # Middleware
    app.add_middleware(RequestIDMiddleware)

    # Exceptions, logging
    register_exception_handlers(app)
    configure_logging(settings.logging.as_json, settings.server.log_level)

    return app
