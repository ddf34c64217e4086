"""Exceptions raised by the authentication and authorization helpers."""


class AuthError(Exception):
    """Raised when a token, a signature or a set of claims cannot be used."""


class PermissionDeniedError(AuthError):
    """Raised when the caller is not allowed to perform the requested action."""