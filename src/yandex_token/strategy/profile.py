from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List

PROVIDER = "yandex"


class MalformedProfileError(ValueError):
    """Profile body was valid JSON but not a usable profile document."""


@dataclass(frozen=True)
class ProfileName:
    family_name: str = ""
    given_name: str = ""


@dataclass(frozen=True)
class ProfileEmail:
    value: str | None = None


@dataclass(frozen=True)
class CanonicalProfile:
    id: str
    display_name: str = ""
    name: ProfileName = field(default_factory=ProfileName)
    emails: List[ProfileEmail] = field(default_factory=list)
    photos: List[Any] = field(default_factory=list)
    provider: str = PROVIDER
    raw_body: str = field(default="", repr=False)
    raw_json: Dict[str, Any] = field(default_factory=dict, repr=False)

    def as_dict(self, include_raw: bool = False) -> Dict[str, Any]:
        """Render the profile in the camelCase shape Passport-style consumers expect."""
        data: Dict[str, Any] = {
            "provider": self.provider,
            "id": self.id,
            "displayName": self.display_name,
            "name": {
                "familyName": self.name.family_name,
                "givenName": self.name.given_name,
            },
            "emails": [{"value": email.value} for email in self.emails],
            "photos": list(self.photos),
        }
        if include_raw:
            data["_raw"] = self.raw_body
            data["_json"] = self.raw_json
        return data


def split_real_name(real_name: str | None) -> ProfileName:
    if not real_name:
        return ProfileName()
    family_name, _, given_name = real_name.partition(" ")
    return ProfileName(family_name=family_name, given_name=given_name)


def _optional_str(data: Dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise MalformedProfileError(f"Profile field {key!r} is not a string")
    return value


def parse_profile(body: str) -> CanonicalProfile:
    """Map a raw Yandex ``/info`` document onto :class:`CanonicalProfile`.

    ``json.JSONDecodeError`` is left to propagate so callers can tell a
    garbage body apart from a transport failure.
    """
    data = json.loads(body)
    if not isinstance(data, dict):
        raise MalformedProfileError("Profile document is not a JSON object")

    profile_id = data.get("id")
    if profile_id is None or profile_id == "":
        raise MalformedProfileError("Profile document has no id")

    return CanonicalProfile(
        id=str(profile_id),
        display_name=_optional_str(data, "display_name") or "",
        name=split_real_name(_optional_str(data, "real_name")),
        emails=[ProfileEmail(value=_optional_str(data, "default_email"))],
        photos=[],
        raw_body=body,
        raw_json=data,
    )
