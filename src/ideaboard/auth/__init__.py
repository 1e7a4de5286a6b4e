"""Authentication and session lifecycle for ideaboard."""

from .context import AuthContext
from .errors import AuthError, AuthorizationError, InvalidCredentials, InvalidToken, StoreError
from .middleware import get_auth_context
from .passwords import PasswordHasher, hash_password, verify_password
from .sessions import SessionManager
from .store import CredentialStore, SqlCredentialStore
from .tokens import TokenIssuer, TokenPair

__all__ = [
    "AuthContext",
    "AuthError",
    "AuthorizationError",
    "InvalidCredentials",
    "InvalidToken",
    "StoreError",
    "get_auth_context",
    "PasswordHasher",
    "hash_password",
    "verify_password",
    "SessionManager",
    "CredentialStore",
    "SqlCredentialStore",
    "TokenIssuer",
    "TokenPair",
]
