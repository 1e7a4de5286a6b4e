"""Resolve the caller's identity from request headers."""

from __future__ import annotations

from uuid import UUID

from ..database.connection import get_async_session
from ..logging import get_logger
from .context import ANONYMOUS, AuthContext
from .errors import AuthError, InvalidToken
from .sessions import SessionManager
from .store import SqlCredentialStore
from .tokens import TokenIssuer

logger = get_logger(__name__)


def extract_token(authorization: str | None, x_token: str | None) -> str | None:
    """Pick the access token from ``Authorization: Bearer`` or ``x-token``."""
    if authorization:
        if authorization.startswith("Bearer "):
            return authorization[7:] or None
        logger.warning("Invalid authorization format received")
        return None
    return x_token or None


async def get_auth_context(
    tokens: TokenIssuer,
    authorization: str | None = None,
    x_token: str | None = None,
    x_refresh_token: str | None = None,
) -> AuthContext:
    """
    Build the AuthContext for a request.

    A valid access token authenticates the request directly. If it is
    rejected and a refresh token came along, the pair is rotated and the new
    tokens are attached to the context so the caller can hand them back in
    response headers. Anything else yields an anonymous context; resolvers
    decide whether that is acceptable.
    """
    token = extract_token(authorization, x_token)
    if not token:
        return ANONYMOUS

    try:
        claims = tokens.verify_access_token(token)
        return AuthContext(
            user_id=UUID(claims["sub"]),
            is_admin=bool(claims.get("admin", False)),
            token=token,
        )
    except (InvalidToken, ValueError):
        if not x_refresh_token:
            return ANONYMOUS

    try:
        async with get_async_session() as db:
            sessions = SessionManager(SqlCredentialStore(db), tokens)
            pair = await sessions.refresh_tokens(token, x_refresh_token)
    except AuthError as e:
        logger.info("Silent token refresh failed", error=str(e))
        return ANONYMOUS

    claims = tokens.verify_access_token(pair.access_token)
    logger.debug("Access token rotated from refresh token", user_id=claims["sub"])
    return AuthContext(
        user_id=UUID(claims["sub"]),
        is_admin=bool(claims.get("admin", False)),
        token=pair.access_token,
        refreshed=pair,
    )
