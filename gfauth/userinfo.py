"""Request context and the user information stored in it."""

from __future__ import annotations

from collections.abc import Hashable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from gfauth.claims import Claims

SYSTEM_GUEST_ROLE_NAME = "system.guest"


@dataclass(frozen=True)
class _ContextKey:
    name: str


INTERCEPTOR_CONTEXT_TOKEN_KEY = _ContextKey("tokenclaims")


class Context:
    """Immutable request context holding values and incoming metadata."""

    __slots__ = ("_values", "_metadata")

    def __init__(
        self,
        values: Mapping[Hashable, Any] | None = None,
        metadata: Mapping[str, tuple[str, ...]] | None = None,
    ) -> None:
        self._values = MappingProxyType(dict(values or {}))
        self._metadata = MappingProxyType(dict(metadata or {}))

    def with_value(self, key: Hashable, value: Any) -> Context:
        """Return a new context that also maps ``key`` to ``value``."""
        return Context({**self._values, key: value}, self._metadata)

    def value(self, key: Hashable) -> Any:
        """Return the value stored under ``key``, or None."""
        return self._values.get(key)

    def with_metadata(self, key: str, value: str) -> Context:
        """Return a new context with ``value`` appended to metadata ``key``."""
        name = key.lower()
        metadata = dict(self._metadata)
        metadata[name] = metadata.get(name, ()) + (value,)
        return Context(self._values, metadata)

    def metadata_value(self, key: str) -> str:
        """Return the first metadata value for ``key``, or an empty string."""
        values = self._metadata.get(key.lower(), ())
        return values[0] if values else ""


@dataclass
class UserInfo:
    """Information about the user taken from the token."""

    username: str = ""
    claims: Claims = field(default_factory=Claims)
    guest: bool = False

    def is_guest(self) -> bool:
        return self.guest


def context_save_user_info(ctx: Context, user: UserInfo) -> Context:
    """Return a context carrying ``user``."""
    return ctx.with_value(INTERCEPTOR_CONTEXT_TOKEN_KEY, user)


def user_info_from_context(ctx: Context) -> UserInfo | None:
    """Return the user stored in ``ctx``; None means auth is not running."""
    user = ctx.value(INTERCEPTOR_CONTEXT_TOKEN_KEY)
    return user if isinstance(user, UserInfo) else None


def new_guest_user() -> UserInfo:
    """Return the user info of the unauthenticated system guest."""
    return UserInfo(claims=Claims(roles=[SYSTEM_GUEST_ROLE_NAME]), guest=True)