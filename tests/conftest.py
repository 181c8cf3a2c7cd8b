from __future__ import annotations

import json

import pytest

from yandex_token.clients.oauth import OAuthClientError
from yandex_token.strategy import StrategyOptions

PROFILE = {
    "id": "00000000",
    "display_name": "ghaiklor",
    "real_name": "Eugene Obrezkov",
    "default_email": "ghaiklor@gmail.com",
}


class StubOAuth2Client:
    """In-memory OAuth2 client returning a canned body or raising."""

    def __init__(self, body: str | None = None, error: BaseException | None = None):
        self.body = body
        self.error = error
        self.calls: list[tuple[str, str]] = []

    async def get(self, url: str, access_token: str) -> str:
        self.calls.append((url, access_token))
        if self.error is not None:
            raise self.error
        return self.body

    async def exchange_code(self, *, code, redirect_uri, code_verifier=None):
        return {"access_token": "exchanged"}

    async def refresh_access_token(self, refresh_token):
        return {"access_token": "refreshed"}

    def build_authorization_url(self, *, redirect_uri, state=None, scope=None, extra_params=None):
        return "https://oauth.yandex.ru/authorize", state or "state"


@pytest.fixture
def profile_body() -> str:
    return json.dumps(PROFILE)


@pytest.fixture
def options() -> StrategyOptions:
    return StrategyOptions(client_id="123", client_secret="123")


@pytest.fixture
def stub_client(profile_body) -> StubOAuth2Client:
    return StubOAuth2Client(body=profile_body)


@pytest.fixture
def failing_client() -> StubOAuth2Client:
    return StubOAuth2Client(
        error=OAuthClientError(
            "Authenticated GET failed",
            status_code=401,
            details={"data": json.dumps({"error_description": "MESSAGE", "error": "CODE"})},
        )
    )
