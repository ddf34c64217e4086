"""Token generators and the process-wide system token manager."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from gfauth.claims import Claims
from gfauth.errors import AuthError
from gfauth.tokens import Options


class Authenticator(ABC):
    """Validates raw tokens and extracts their claims."""

    @abstractmethod
    def authenticate_token(self, rawtoken: str) -> Claims:
        """Validate ``rawtoken`` and return its claims."""

    @abstractmethod
    def username(self, claims: Claims) -> str:
        """Return the unique id of the user described by ``claims``."""


class TokenGenerator(ABC):
    """Creates tokens for node to node communication."""

    @abstractmethod
    def get_token(self, options: Options) -> str:
        """Return a new token."""

    @abstractmethod
    def issuer(self) -> str:
        """Return the issuer of the tokens this generator creates."""

    @abstractmethod
    def get_authenticator(self) -> Authenticator:
        """Return an authenticator for this generator's issuer."""


@dataclass(frozen=True)
class NoAuth(TokenGenerator):
    """Token generator used when authentication is disabled."""

    reason: str = "No authentication set"

    def issuer(self) -> str:
        return ""

    def get_authenticator(self) -> Authenticator:
        raise AuthError(self.reason)

    def get_token(self, options: Options | None = None) -> str:
        if options is not None and not isinstance(options, Options):
            raise TypeError(f"expected Options, got {type(options).__name__}")
        # Without authentication there is no token to hand out.
        return self.issuer()


@dataclass
class _Registry:
    generator: TokenGenerator


_registry = _Registry(NoAuth())


def init_system_token_manager(generator: TokenGenerator) -> None:
    """Install ``generator`` as the system token manager."""
    if not isinstance(generator, TokenGenerator):
        raise TypeError(f"expected TokenGenerator, got {type(generator).__name__}")
    _registry.generator = generator


def system_token_manager() -> TokenGenerator:
    """Return the installed system token manager."""
    return _registry.generator


def enabled() -> bool:
    """Return True if authentication is enabled."""
    return bool(_registry.generator.issuer())