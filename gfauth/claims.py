"""Token claims and the choice of which claim identifies the user."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from gfauth.errors import AuthError

REQUIRED_CLAIMS = ("iss", "sub", "exp", "iat", "name", "email")
CUSTOM_CLAIMS = ("roles", "groups")

_STRING_CLAIMS = (
    ("iss", "issuer"),
    ("sub", "subject"),
    ("name", "name"),
    ("email", "email"),
)
_LIST_CLAIMS = (
    ("roles", "roles"),
    ("groups", "groups"),
)


class UsernameClaimType(str, Enum):
    """Which claim holds the unique id of the user."""

    DEFAULT = ""
    SUBJECT = "sub"
    EMAIL = "email"
    NAME = "name"


@dataclass
class Claims:
    """The claims carried in a token."""

    issuer: str = ""
    subject: str = ""
    name: str = ""
    email: str = ""
    roles: list[str] | None = None
    groups: list[str] | None = None

    @classmethod
    def from_mapping(cls, data: Any) -> Claims:
        """Build claims from a decoded JSON object, ignoring unknown keys."""
        if not isinstance(data, Mapping):
            raise AuthError("claims must be a JSON object")
        values: dict[str, Any] = {}
        for key, attr in _STRING_CLAIMS:
            value = data.get(key)
            if value is None:
                continue
            if not isinstance(value, str):
                raise AuthError(f"claim {key!r} must be a string")
            values[attr] = value
        for key, attr in _LIST_CLAIMS:
            value = data.get(key)
            if value is None:
                continue
            if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
                raise AuthError(f"claim {key!r} must be a list of strings")
            values[attr] = list(value)
        return cls(**values)

    def to_mapping(self) -> dict[str, Any]:
        """Return the claims as a JSON-ready mapping; empty lists are left out."""
        result: dict[str, Any] = {
            "iss": self.issuer,
            "sub": self.subject,
            "name": self.name,
            "email": self.email,
        }
        if self.roles:
            result["roles"] = list(self.roles)
        if self.groups:
            result["groups"] = list(self.groups)
        return result


def get_username(username_claim: UsernameClaimType | str, claims: Claims) -> str:
    """Return the user's unique id according to the configured claim."""
    if username_claim == UsernameClaimType.EMAIL:
        return claims.email
    if username_claim == UsernameClaimType.NAME:
        return claims.name
    return claims.subject


def validate_username(username_claim: UsernameClaimType | str, claims: Claims) -> None:
    """Raise AuthError if the claim chosen as the username is empty."""
    if username_claim == UsernameClaimType.EMAIL:
        field_name, value = "email", claims.email
    elif username_claim == UsernameClaimType.NAME:
        field_name, value = "name", claims.name
    else:
        field_name, value = "sub", claims.subject
    if not value:
        raise AuthError(
            f"System set to use the value of {field_name} as the username,"
            f" therefore the value of {field_name} in the token cannot be empty"
        )