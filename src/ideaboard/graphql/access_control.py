"""
Shared access control logic for GraphQL resolvers
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry

from ..auth.context import ANONYMOUS, AuthContext
from ..auth.errors import AuthorizationError
from ..auth.sessions import SessionManager
from ..auth.store import SqlCredentialStore
from ..logging import get_logger

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from ..events import EventBus

logger = get_logger(__name__)


def get_auth_context_from_info(info: strawberry.Info) -> AuthContext:
    """Return the request's AuthContext, anonymous when none was resolved."""
    auth = info.context.get("auth")
    if auth is None:
        return ANONYMOUS
    return auth


def require_authenticated(info: strawberry.Info) -> AuthContext:
    """Return the AuthContext or raise if the caller is not logged in."""
    auth = get_auth_context_from_info(info)
    if not auth.is_authenticated:
        raise AuthorizationError("Authentication required")
    return auth


def require_admin(info: strawberry.Info) -> AuthContext:
    """Return the AuthContext or raise unless the caller is an administrator."""
    auth = require_authenticated(info)
    if not auth.is_admin:
        logger.info("Admin access denied", user_id=str(auth.user_id))
        raise AuthorizationError("Admin access required")
    return auth


def get_session_manager(info: strawberry.Info, db: AsyncSession) -> SessionManager:
    """Build a SessionManager bound to ``db`` and the app's token issuer."""
    tokens = info.context.get("tokens")
    if tokens is None:
        raise RuntimeError("Token issuer not found in GraphQL context")
    return SessionManager(SqlCredentialStore(db), tokens)


def get_event_bus(info: strawberry.Info) -> EventBus:
    events = info.context.get("events")
    if events is None:
        raise RuntimeError("Event bus not found in GraphQL context")
    return events
