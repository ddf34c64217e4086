"""Creation and inspection of signed JWT tokens."""

from __future__ import annotations

import base64
import binascii
import json
import math
import time
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Any

import jwt
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from jwt.algorithms import get_default_algorithms

from gfauth.claims import Claims
from gfauth.errors import AuthError
from gfauth.userinfo import Context

AUTHORIZATION_HEADER = "authorization"


@dataclass
class Options:
    """Options applied when a token is created."""

    expiration: int = 0
    iat_subtract: timedelta = field(default_factory=timedelta)


@dataclass
class Signature:
    """A signing algorithm name together with its key."""

    algorithm: str
    key: Any


def new_signature_shared_secret(secret: str) -> Signature:
    """Return an HS256 signature using ``secret``."""
    return Signature(algorithm="HS256", key=secret.encode())


def _load_private_key(pem: bytes, kind: str, expected: type) -> Any:
    try:
        key = serialization.load_pem_private_key(pem, None)
    except (ValueError, TypeError) as exc:
        raise AuthError(f"Failed to parse {kind} file: {exc}") from exc
    if not isinstance(key, expected):
        raise AuthError(f"Failed to parse {kind} file: key is not a valid {kind} private key")
    return key


def new_signature_rsa(pem: bytes) -> Signature:
    """Return an RS256 signature from a PEM encoded RSA private key."""
    key = _load_private_key(pem, "RSA", rsa.RSAPrivateKey)
    return Signature(algorithm="RS256", key=key)


def new_signature_rsa_from_file(filename: str | Path) -> Signature:
    try:
        pem = Path(filename).read_bytes()
    except OSError as exc:
        raise AuthError(f"Failed to read RSA file: {exc}") from exc
    return new_signature_rsa(pem)


def new_signature_ecdsa(pem: bytes) -> Signature:
    """Return an ES256 signature from a PEM encoded EC private key."""
    key = _load_private_key(pem, "ECDSA", ec.EllipticCurvePrivateKey)
    return Signature(algorithm="ES256", key=key)


def new_signature_ecdsa_from_file(filename: str | Path) -> Signature:
    try:
        pem = Path(filename).read_bytes()
    except OSError as exc:
        raise AuthError(f"Failed to read ECDSA file: {exc}") from exc
    return new_signature_ecdsa(pem)


def _decode_segment(segment: str) -> bytes:
    if any(ch in segment for ch in "+/="):
        raise ValueError("illegal base64 data")
    padded = segment + "=" * (-len(segment) % 4)
    try:
        return base64.b64decode(padded, altchars=b"-_", validate=True)
    except binascii.Error as exc:
        raise ValueError(str(exc)) from exc


def token_claims(rawtoken: str) -> Claims:
    """Return the claims of a raw JWT without verifying its signature."""
    parts = rawtoken.split(".")
    if len(parts) < 3:
        raise AuthError(f"Token is invalid: {rawtoken}")
    try:
        claim_bytes = _decode_segment(parts[1])
    except ValueError as exc:
        raise AuthError(f"Failed to decode claims: {exc}") from exc
    try:
        data = json.loads(claim_bytes)
        return Claims.from_mapping(data)
    except (ValueError, AuthError) as exc:
        raise AuthError(
            f"Unable to get information from the claims in the token: {exc}"
        ) from exc


def token_issuer(rawtoken: str) -> str:
    """Return the issuer of a raw JWT."""
    issuer = token_claims(rawtoken).issuer
    if not issuer:
        raise AuthError("Issuer was not specified in the token")
    return issuer


def is_jwt_token(authstring: str) -> bool:
    """Return True if ``authstring`` parses as a JWT with a known algorithm."""
    try:
        header = jwt.get_unverified_header(authstring)
        jwt.decode(authstring, options={"verify_signature": False})
    except jwt.PyJWTError:
        return False
    algorithm = header.get("alg")
    return isinstance(algorithm, str) and algorithm in get_default_algorithms()


def token(claims: Claims, signature: Signature, options: Options | None = None) -> str:
    """Return a signed JWT holding ``claims``."""
    options = options or Options()
    issued_at = math.floor(time.time() - options.iat_subtract.total_seconds())
    payload: dict[str, Any] = {
        "sub": claims.subject,
        "iss": claims.issuer,
        "email": claims.email,
        "name": claims.name,
        "roles": claims.roles,
        "iat": issued_at,
        "exp": options.expiration,
    }
    if claims.groups is not None:
        payload["groups"] = claims.groups
    try:
        return jwt.encode(payload, signature.key, algorithm=signature.algorithm)
    except (jwt.PyJWTError, TypeError, ValueError, NotImplementedError) as exc:
        raise AuthError(f"Unable to sign token: {exc}") from exc


def is_guest(ctx: Context) -> bool:
    """Return True if the request carries no authorization metadata."""
    return ctx.metadata_value(AUTHORIZATION_HEADER) == ""