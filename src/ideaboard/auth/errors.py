"""Error types raised by the authentication layer."""

from __future__ import annotations


class AuthError(Exception):
    """Base class for authentication and session failures."""

    pass


class InvalidCredentials(AuthError):
    """Login with an unknown email, an unclaimed account, or a wrong password."""

    def __init__(self, message: str = "Invalid login"):
        super().__init__(message)


class InvalidToken(AuthError):
    """A token is malformed, expired, tampered with, or names the wrong user."""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class StoreError(AuthError):
    """The credential store failed to read or write."""

    pass


class AuthorizationError(AuthError):
    """The caller is authenticated (or not) but lacks permission."""

    pass
