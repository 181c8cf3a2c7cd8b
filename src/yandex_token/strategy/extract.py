from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, NamedTuple

# Lookup order: body first so POSTed secrets win over URL-embedded ones.
_CONTAINERS = ("body", "query", "headers")


@dataclass(frozen=True)
class TokenRequest:
    """Framework-neutral view of an inbound request."""

    body: Mapping[str, Any] | None = None
    query: Mapping[str, Any] | None = None
    headers: Mapping[str, Any] | None = None
    source: Any = field(default=None, compare=False, repr=False)


class Credentials(NamedTuple):
    access_token: str | None
    refresh_token: str | None


def extract_token(request: Any, field_name: str) -> str | None:
    """Return the first non-empty ``field_name`` found in the request containers."""
    for container_name in _CONTAINERS:
        container = getattr(request, container_name, None)
        if not isinstance(container, Mapping):
            continue
        value = container.get(field_name)
        if value:
            return value
    return None


def extract_credentials(
    request: Any,
    access_token_field: str = "access_token",
    refresh_token_field: str = "refresh_token",
) -> Credentials:
    return Credentials(
        access_token=extract_token(request, access_token_field),
        refresh_token=extract_token(request, refresh_token_field),
    )
