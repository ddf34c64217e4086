"""Token authentication against OpenID Connect providers and JWKS endpoints."""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit

import jwt
from jwt.algorithms import get_default_algorithms

from gfauth.claims import (
    CUSTOM_CLAIMS,
    REQUIRED_CLAIMS,
    Claims,
    UsernameClaimType,
    get_username,
    validate_username,
)
from gfauth.errors import AuthError
from gfauth.generator import Authenticator

logger = logging.getLogger(__name__)

Verifier = Callable[[str], Mapping[str, Any]]

_DEFAULT_ALGORITHMS: tuple[str, ...] = ("RS256",)
_ASYMMETRIC_ALGORITHMS = frozenset(
    {"RS256", "RS384", "RS512", "ES256", "ES384", "ES512", "PS256", "PS384", "PS512", "EdDSA"}
)
_DISCOVERY_TIMEOUT = 30


class _JWTVerifier:
    """Verifies signature, issuer, audience and expiry of ID tokens."""

    def __init__(
        self,
        issuer: str,
        jwks_client: jwt.PyJWKClient,
        *,
        client_id: str = "",
        skip_client_id_check: bool = False,
        skip_issuer_check: bool = False,
        algorithms: Sequence[str] = _DEFAULT_ALGORITHMS,
    ) -> None:
        self._issuer = issuer
        self._jwks_client = jwks_client
        self._client_id = client_id
        self._skip_client_id_check = skip_client_id_check
        self._skip_issuer_check = skip_issuer_check
        self._algorithms = list(algorithms)

    def __call__(self, rawtoken: str) -> dict[str, Any]:
        if not self._skip_client_id_check and not self._client_id:
            raise AuthError(
                "invalid configuration, a client id must be provided"
                " or the client id check must be skipped"
            )
        try:
            signing_key = self._jwks_client.get_signing_key_from_jwt(rawtoken)
            return jwt.decode(
                rawtoken,
                signing_key.key,
                algorithms=self._algorithms,
                audience=None if self._skip_client_id_check else self._client_id,
                issuer=None if self._skip_issuer_check else self._issuer,
                options={
                    "verify_aud": not self._skip_client_id_check,
                    "require": ["exp"],
                },
            )
        except jwt.PyJWTError as exc:
            raise AuthError(str(exc)) from exc


@dataclass
class OIDCAuthConfig:
    """Settings for authenticating tokens issued by an OIDC provider."""

    issuer: str = ""
    client_id: str = ""
    skip_client_id_check: bool = False
    skip_issuer_check: bool = False
    username_claim: UsernameClaimType | str = UsernameClaimType.DEFAULT
    namespace: str = ""


class OIDCAuthenticator(Authenticator):
    """Validates tokens issued by an OIDC provider."""

    def __init__(
        self,
        url: str = "",
        verifier: Verifier | None = None,
        username_claim: UsernameClaimType | str = UsernameClaimType.DEFAULT,
        namespace: str = "",
    ) -> None:
        self.url = url
        self.username_claim = username_claim
        self.namespace = namespace
        self._verifier = verifier

    def authenticate_token(self, rawtoken: str) -> Claims:
        """Verify ``rawtoken`` and return its claims."""
        if self._verifier is None:
            raise AuthError("Token failed validation: no verifier configured")
        try:
            data = self._verifier(rawtoken)
        except AuthError as exc:
            raise AuthError(f"Token failed validation: {exc}") from exc
        if not isinstance(data, Mapping):
            raise AuthError("Unable to get claim map from token")
        claims = dict(data)
        for required in REQUIRED_CLAIMS:
            if required not in claims:
                raise AuthError(f"Required claim {required} missing from token")
        return self.parse_claims(claims)

    def username(self, claims: Claims) -> str:
        """Return the configured unique id of the user."""
        return get_username(self.username_claim, claims)

    def parse_claims(self, claims: Mapping[str, Any]) -> Claims:
        """Turn a decoded claim map into Claims, honouring the namespace."""
        merged = dict(claims)
        if self.namespace:
            for custom in CUSTOM_CLAIMS:
                key = self.namespace + custom
                if key in merged:
                    merged[custom] = merged[key]
        try:
            result = Claims.from_mapping(merged)
        except AuthError as exc:
            raise AuthError(f"Unable to get claims from token: {exc}") from exc
        validate_username(self.username_claim, result)
        return result


def _discover(issuer: str) -> dict[str, Any]:
    well_known = issuer.rstrip("/") + "/.well-known/openid-configuration"
    try:
        with urllib.request.urlopen(well_known, timeout=_DISCOVERY_TIMEOUT) as response:
            document = json.load(response)
    except (OSError, ValueError) as exc:
        raise AuthError(
            f"Unable to communicate with OIDC provider {issuer}: {exc}"
        ) from exc
    if not isinstance(document, dict):
        raise AuthError(
            f"Unable to communicate with OIDC provider {issuer}: invalid discovery document"
        )
    return document


def new_oidc_authenticator(config: OIDCAuthConfig) -> OIDCAuthenticator:
    """Discover the provider at ``config.issuer`` and return an authenticator."""
    document = _discover(config.issuer)
    discovered_issuer = document.get("issuer")
    if discovered_issuer != config.issuer:
        raise AuthError(
            f"Unable to communicate with OIDC provider {config.issuer}: issuer did not"
            f" match the issuer returned by provider, expected {config.issuer!r}"
            f" got {discovered_issuer!r}"
        )
    jwks_uri = document.get("jwks_uri")
    if not isinstance(jwks_uri, str) or not jwks_uri:
        raise AuthError(
            f"Unable to communicate with OIDC provider {config.issuer}: missing jwks_uri"
        )
    known = set(get_default_algorithms()) & _ASYMMETRIC_ALGORITHMS
    advertised = document.get("id_token_signing_alg_values_supported") or []
    algorithms = [alg for alg in advertised if isinstance(alg, str) and alg in known]
    verifier = _JWTVerifier(
        config.issuer,
        jwt.PyJWKClient(jwks_uri),
        client_id=config.client_id,
        skip_client_id_check=config.skip_client_id_check,
        skip_issuer_check=config.skip_issuer_check,
        algorithms=algorithms or _DEFAULT_ALGORITHMS,
    )
    return OIDCAuthenticator(
        url=config.issuer,
        verifier=verifier,
        username_claim=config.username_claim,
        namespace=config.namespace,
    )


@dataclass
class JWKSAuthConfig:
    """Settings for authenticating tokens against a JWKS endpoint."""

    issuer: str = ""
    jwks_url: str = ""
    username_claim: UsernameClaimType | str = UsernameClaimType.DEFAULT
    namespace: str = ""


class JWKSAuthenticator(OIDCAuthenticator):
    """Validates tokens with keys published at a JWKS URL."""

    def __init__(
        self,
        url: str = "",
        verifier: Verifier | None = None,
        username_claim: UsernameClaimType | str = UsernameClaimType.DEFAULT,
        namespace: str = "",
        jwks_url: str = "",
        keyset: jwt.PyJWKClient | None = None,
    ) -> None:
        super().__init__(url, verifier, username_claim, namespace)
        self.jwks_url = jwks_url
        self.keyset = keyset


def _host(url: str, what: str) -> str:
    try:
        parts = urlsplit(url)
        parts.port
    except ValueError as exc:
        raise AuthError(f"error parsing {what}: {exc}") from exc
    return parts.netloc.rpartition("@")[2]


def new_jwks_authenticator(config: JWKSAuthConfig) -> JWKSAuthenticator:
    """Return a JWKS authenticator; the issuer must share the JWKS URL's host."""
    if not config.jwks_url:
        raise AuthError("JWKS url missing")
    if not config.issuer:
        raise AuthError("issuer missing")
    jwks_host = _host(config.jwks_url, "JWKSurl")
    issuer_host = _host(config.issuer, "issuer")
    if jwks_host != issuer_host:
        raise AuthError(
            f"issuer[{config.issuer}] host is not the same as JWKSUrl[{config.jwks_url}]"
        )
    return new_jwks_with_issuer_authenticator(config)


def new_jwks_with_issuer_authenticator(config: JWKSAuthConfig) -> JWKSAuthenticator:
    """Return a JWKS authenticator whose issuer may live on another host."""
    keyset = jwt.PyJWKClient(config.jwks_url)
    verifier = _JWTVerifier(config.issuer, keyset, skip_client_id_check=True)
    logger.info("Authenticator JWKS issuer=%s jwksUrl=%s", config.issuer, config.jwks_url)
    return JWKSAuthenticator(
        url=config.issuer,
        verifier=verifier,
        username_claim=config.username_claim,
        namespace=config.namespace,
        jwks_url=config.jwks_url,
        keyset=keyset,
    )