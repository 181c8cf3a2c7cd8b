from __future__ import annotations

from functools import lru_cache
from importlib.metadata import PackageNotFoundError, version as pkg_version
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _package_version(default: str = "0.1.0") -> str:
    try:
        return pkg_version("yandex-token-auth")
    except PackageNotFoundError:
        return default


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    reload: bool = False
    log_level: Literal["critical", "error", "warning", "info", "debug", "trace"] = "info"


class StrategySettings(BaseModel):
    # Yandex application credentials
    client_id: str = ""
    client_secret: str = ""

    # Provider endpoints
    authorization_url: str = "https://oauth.yandex.ru/authorize"
    token_url: str = "https://oauth.yandex.ru/token"
    profile_url: str = "https://login.yandex.ru/info?format=json"

    # Where to look for tokens in the inbound request
    access_token_field: str = "access_token"
    refresh_token_field: str = "refresh_token"
    pass_req_to_callback: bool = False

    # Profile GET authentication
    access_token_name: str = "oauth_token"
    use_authorization_header_for_get: bool = True
    timeout: float = 10.0


class LoggingSettings(BaseModel):
    as_json: bool = False


class Settings(BaseSettings):
    """Application settings loaded from environment (and .env)."""

    app_name: str = "Yandex Token Auth"
    app_version: str = Field(default_factory=_package_version)

    server: ServerSettings = ServerSettings()
    strategy: StrategySettings = StrategySettings()
    logging: LoggingSettings = LoggingSettings()

    model_config = SettingsConfigDict(
        env_prefix="YANDEX_TOKEN_",
        env_nested_delimiter="__",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
