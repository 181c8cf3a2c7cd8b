from __future__ import annotations

from typing import Any, Mapping, Protocol


class OAuth2Client(Protocol):
    """Capability the token strategy needs from an OAuth2 client.

    Only ``get`` is used while authenticating; the token operations are
    carried for integrators that also run the authorization-code flow.
    """

    async def get(self, url: str, access_token: str) -> str:
        ...

    async def exchange_code(
        self,
        *,
        code: str,
        redirect_uri: str,
        code_verifier: str | None = None,
    ) -> Mapping[str, Any]:
        ...

    async def refresh_access_token(self, refresh_token: str) -> Mapping[str, Any]:
        ...

    def build_authorization_url(
        self,
        *,
        redirect_uri: str,
        state: str | None = None,
        scope: str | None = None,
        extra_params: Mapping[str, Any] | None = None,
    ) -> tuple[str, str]:
        ...
