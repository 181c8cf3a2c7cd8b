from __future__ import annotations

from typing import Any, Dict, NoReturn

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from yandex_token.strategy import CanonicalProfile, TokenRequest, VerifyResult, YandexTokenStrategy, complete


router = APIRouter(prefix="/auth", tags=["auth"])

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def default_verify(access_token: str, refresh_token: str | None, profile: CanonicalProfile) -> VerifyResult:
    """Accept every profile Yandex returns as the authenticated user."""
    return VerifyResult(profile.as_dict())


def get_strategy(request: Request) -> YandexTokenStrategy:
    return request.app.state.strategy


async def token_request(request: Request) -> TokenRequest:
    """Expose the body, query string and headers the strategy reads tokens from."""
    body: Dict[str, Any] = {}
    content_type = request.headers.get("content-type", "")
    if request.method != "GET" and content_type.startswith("application/json"):
        try:
            payload = await request.json()
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid JSON body")
        if isinstance(payload, dict):
            body = payload
    elif request.method != "GET" and content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        body = {key: value for key, value in form.items() if isinstance(value, str)}

    return TokenRequest(
        body=body,
        query=request.query_params,
        headers=request.headers,
        source=request,
    )


def _success(user: Any, info: Any) -> JSONResponse:
    return JSONResponse(content={"user": jsonable_encoder(user), "info": jsonable_encoder(info)})


def _fail(info: Any) -> JSONResponse:
    message = info.get("message") if isinstance(info, dict) else info
    return JSONResponse(
        status_code=401,
        content={"detail": message or "Unauthorized"},
        headers={"WWW-Authenticate": "Bearer"},
    )


def _error(cause: BaseException) -> NoReturn:
    # Rendered by the exception handlers registered on the app
    raise cause


@router.api_route("/yandex/token", methods=["GET", "POST"])
async def authenticate_token(
    credentials: TokenRequest = Depends(token_request),
    strategy: YandexTokenStrategy = Depends(get_strategy),
):
    result = await strategy.authenticate(credentials)
    return complete(result, success=_success, fail=_fail, error=_error)
