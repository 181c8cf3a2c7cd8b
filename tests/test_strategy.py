import asyncio
import json

import httpx
import pytest
from pydantic import ValidationError

from conftest import StubOAuth2Client
from yandex_token.clients.oauth import HttpOAuth2Client, OAuthClientError, OAuthConfigurationError
from yandex_token.strategy import (
    CanonicalProfile,
    Error,
    ErrorKind,
    Failure,
    InternalOAuthError,
    MalformedProfileError,
    StrategyOptions,
    Success,
    TokenRequest,
    VerifyResult,
    YandexTokenStrategy,
    complete,
)

TOKENS = {"access_token": "access_token", "refresh_token": "refresh_token"}


def echo_verify(access_token, refresh_token, profile):
    assert access_token == "access_token"
    assert refresh_token == "refresh_token"
    assert isinstance(profile, CanonicalProfile)
    return VerifyResult(profile, {"info": "foo"})


def test_strategy_initializes(options):
    strategy = YandexTokenStrategy(options, echo_verify)

    assert strategy.name == "yandex-token"
    assert isinstance(strategy.oauth2, HttpOAuth2Client)
    assert strategy.oauth2.use_authorization_header_for_get
    assert strategy.options.profile_url == "https://login.yandex.ru/info?format=json"
    assert strategy.options.token_url == "https://oauth.yandex.ru/token"


def test_missing_credentials_fail_at_construction():
    with pytest.raises(OAuthConfigurationError):
        YandexTokenStrategy()
    with pytest.raises(OAuthConfigurationError):
        YandexTokenStrategy({"client_id": "123"}, echo_verify)
    with pytest.raises(OAuthConfigurationError):
        YandexTokenStrategy({"client_secret": "123"}, echo_verify, oauth2=StubOAuth2Client())


def test_verify_must_be_callable(options):
    with pytest.raises(TypeError):
        YandexTokenStrategy(options, None)


def test_blank_urls_fall_back_to_defaults():
    options = StrategyOptions(client_id="1", client_secret="2", profile_url="", authorization_url=None)
    assert options.profile_url == "https://login.yandex.ru/info?format=json"
    assert options.authorization_url == "https://oauth.yandex.ru/authorize"


@pytest.mark.asyncio
async def test_authenticate_with_token_in_body(options, stub_client):
    strategy = YandexTokenStrategy(options, echo_verify, oauth2=stub_client)

    result = await strategy.authenticate(TokenRequest(body=TOKENS))

    assert isinstance(result, Success)
    assert result.user.id == "00000000"
    assert result.info == {"info": "foo"}
    assert stub_client.calls == [("https://login.yandex.ru/info?format=json", "access_token")]


@pytest.mark.asyncio
async def test_authenticate_with_token_in_query(options, stub_client):
    strategy = YandexTokenStrategy(options, echo_verify, oauth2=stub_client)

    result = await strategy.authenticate(TokenRequest(query=TOKENS))

    assert isinstance(result, Success)
    assert result.info == {"info": "foo"}


@pytest.mark.asyncio
async def test_missing_access_token_fails_without_fetching(options, stub_client):
    strategy = YandexTokenStrategy(options, echo_verify, oauth2=stub_client)

    result = await strategy.authenticate(TokenRequest())

    assert isinstance(result, Failure)
    assert result.info == {"message": "You should provide access_token"}
    assert result.kind is ErrorKind.MISSING_CREDENTIAL
    assert stub_client.calls == []


@pytest.mark.asyncio
async def test_missing_token_message_uses_configured_field(stub_client):
    options = StrategyOptions(client_id="1", client_secret="2", access_token_field="token")
    strategy = YandexTokenStrategy(options, echo_verify, oauth2=stub_client)

    result = await strategy.authenticate(TokenRequest(body={"access_token": "ignored"}))

    assert result.info == {"message": "You should provide token"}


@pytest.mark.asyncio
async def test_pass_req_to_callback(stub_client):
    options = StrategyOptions(client_id="123", client_secret="123", pass_req_to_callback=True)
    request = TokenRequest(body=TOKENS)
    seen = []

    def verify(req, access_token, refresh_token, profile):
        seen.append(req)
        return VerifyResult(profile, {"info": "foo"})

    strategy = YandexTokenStrategy(options, verify, oauth2=stub_client)
    result = await strategy.authenticate(request)

    assert isinstance(result, Success)
    assert seen == [request]


@pytest.mark.asyncio
async def test_request_not_passed_by_default(options, stub_client):
    seen = []

    def verify(*args):
        seen.append(args)
        return args[-1]

    strategy = YandexTokenStrategy(options, verify, oauth2=stub_client)
    result = await strategy.authenticate(TokenRequest(body=TOKENS))

    assert len(seen[0]) == 3
    assert seen[0][0] == "access_token"
    assert isinstance(result, Success)
    assert result.info is None


@pytest.mark.asyncio
async def test_missing_refresh_token_passed_as_none(options, stub_client):
    received = []

    async def verify(access_token, refresh_token, profile):
        received.append(refresh_token)
        return VerifyResult({"id": profile.id})

    strategy = YandexTokenStrategy(options, verify, oauth2=stub_client)
    result = await strategy.authenticate(TokenRequest(body={"access_token": "a"}))

    assert received == [None]
    assert result == Success({"id": "00000000"}, None)


@pytest.mark.asyncio
async def test_verify_rejection_is_failure(options, stub_client):
    strategy = YandexTokenStrategy(
        options, lambda a, r, p: VerifyResult(False, {"message": "banned"}), oauth2=stub_client
    )

    result = await strategy.authenticate(TokenRequest(body=TOKENS))

    assert result == Failure({"message": "banned"}, kind=ErrorKind.VERIFICATION_REJECTED)


@pytest.mark.asyncio
async def test_verify_exception_is_error(options, stub_client):
    boom = RuntimeError("database down")

    async def verify(access_token, refresh_token, profile):
        raise boom

    strategy = YandexTokenStrategy(options, verify, oauth2=stub_client)
    result = await strategy.authenticate(TokenRequest(body=TOKENS))

    assert isinstance(result, Error)
    assert result.cause is boom
    assert result.kind is ErrorKind.VERIFICATION_ERROR


@pytest.mark.asyncio
async def test_transport_failure_is_error(options, failing_client):
    strategy = YandexTokenStrategy(options, echo_verify, oauth2=failing_client)

    result = await strategy.authenticate(TokenRequest(body=TOKENS))

    assert isinstance(result, Error)
    assert isinstance(result.cause, InternalOAuthError)
    assert result.cause.message == "Failed to fetch user profile"
    assert result.cause.status_code == 401
    assert result.kind is ErrorKind.TRANSPORT_FAILURE


@pytest.mark.asyncio
async def test_garbage_body_is_error(options):
    strategy = YandexTokenStrategy(options, echo_verify, oauth2=StubOAuth2Client(body="not a JSON"))

    result = await strategy.authenticate(TokenRequest(body=TOKENS))

    assert isinstance(result, Error)
    assert isinstance(result.cause, json.JSONDecodeError)
    assert result.kind is ErrorKind.MALFORMED_RESPONSE


@pytest.mark.asyncio
async def test_user_profile(options, stub_client):
    strategy = YandexTokenStrategy(options, echo_verify, oauth2=stub_client)

    profile = await strategy.user_profile("accessToken")

    assert profile.provider == "yandex"
    assert profile.id == "00000000"
    assert profile.display_name == "ghaiklor"
    assert profile.name.family_name == "Eugene"
    assert profile.name.given_name == "Obrezkov"
    assert profile.as_dict()["emails"] == [{"value": "ghaiklor@gmail.com"}]
    assert isinstance(profile.raw_body, str)
    assert isinstance(profile.raw_json, dict)


@pytest.mark.asyncio
async def test_user_profile_wraps_transport_errors(options):
    for error in (
        httpx.ConnectError("refused"),
        OAuthClientError("Authenticated GET failed", status_code=500),
        RuntimeError("ERROR"),
    ):
        strategy = YandexTokenStrategy(options, echo_verify, oauth2=StubOAuth2Client(error=error))
        with pytest.raises(InternalOAuthError) as ei:
            await strategy.user_profile("accessToken")
        assert ei.value.message == "Failed to fetch user profile"
        assert ei.value.__cause__ is error


@pytest.mark.asyncio
async def test_user_profile_does_not_wrap_parse_errors(options):
    strategy = YandexTokenStrategy(options, echo_verify, oauth2=StubOAuth2Client(body="not a JSON"))
    with pytest.raises(json.JSONDecodeError):
        await strategy.user_profile("accessToken")

    strategy = YandexTokenStrategy(options, echo_verify, oauth2=StubOAuth2Client(body="[]"))
    with pytest.raises(MalformedProfileError):
        await strategy.user_profile("accessToken")


@pytest.mark.asyncio
async def test_concurrent_attempts_do_not_share_state(options):
    class PerTokenClient(StubOAuth2Client):
        async def get(self, url, access_token):
            await asyncio.sleep(0)
            return json.dumps({"id": access_token})

    strategy = YandexTokenStrategy(options, lambda a, r, p: p.id, oauth2=PerTokenClient())

    results = await asyncio.gather(
        *(strategy.authenticate(TokenRequest(body={"access_token": f"t{i}"})) for i in range(5))
    )

    assert [r.user for r in results] == [f"t{i}" for i in range(5)]


def test_complete_invokes_exactly_one_handler():
    calls = []
    handlers = dict(
        success=lambda user, info: calls.append(("success", user, info)),
        fail=lambda info: calls.append(("fail", info)),
        error=lambda cause: calls.append(("error", cause)),
    )
    boom = ValueError("x")

    complete(Success("user", {"info": "foo"}), **handlers)
    complete(Failure({"message": "no"}), **handlers)
    complete(Error(boom), **handlers)

    assert calls == [("success", "user", {"info": "foo"}), ("fail", {"message": "no"}), ("error", boom)]


def test_unknown_option_is_rejected():
    with pytest.raises(ValidationError):
        StrategyOptions(client_id="123", client_secret="123", passReqToCallback=True)


@pytest.mark.asyncio
async def test_any_client_failure_is_wrapped_as_fetch_error(options):
    boom = RuntimeError("ERROR")
    strategy = YandexTokenStrategy(options, echo_verify, oauth2=StubOAuth2Client(error=boom))

    result = await strategy.authenticate(TokenRequest(body=TOKENS))

    assert isinstance(result, Error)
    assert isinstance(result.cause, InternalOAuthError)
    assert result.cause.message == "Failed to fetch user profile"
    assert result.cause.__cause__ is boom
    assert result.kind is ErrorKind.TRANSPORT_FAILURE


@pytest.mark.asyncio
async def test_wrongly_typed_profile_field_is_malformed(options):
    body = json.dumps({"id": "1", "real_name": 123})
    strategy = YandexTokenStrategy(options, echo_verify, oauth2=StubOAuth2Client(body=body))

    result = await strategy.authenticate(TokenRequest(body=TOKENS))

    assert isinstance(result, Error)
    assert isinstance(result.cause, MalformedProfileError)
    assert result.kind is ErrorKind.MALFORMED_RESPONSE


@pytest.mark.asyncio
async def test_plain_tuple_is_read_as_user_and_info(options, stub_client):
    rejecting = YandexTokenStrategy(options, lambda a, r, p: (None, {"message": "x"}), oauth2=stub_client)
    accepting = YandexTokenStrategy(options, lambda a, r, p: ("user", {"info": "foo"}), oauth2=stub_client)

    rejected = await rejecting.authenticate(TokenRequest(body=TOKENS))
    accepted = await accepting.authenticate(TokenRequest(body=TOKENS))

    assert rejected == Failure({"message": "x"}, kind=ErrorKind.VERIFICATION_REJECTED)
    assert accepted == Success("user", {"info": "foo"})
