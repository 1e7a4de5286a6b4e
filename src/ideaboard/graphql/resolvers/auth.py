from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

import strawberry

from ...database.connection import get_async_session
from ...dbmodels import Users
from ...logging import get_logger
from ..access_control import get_auth_context_from_info, get_session_manager

if TYPE_CHECKING:
    from ..types.user import AuthPayload, User

logger = get_logger(__name__)


async def resolve_current_user(info: strawberry.Info) -> User | None:
    """The logged-in user, or None for anonymous callers."""
    from .user import to_user_type

    auth = get_auth_context_from_info(info)
    if not auth.is_authenticated:
        return None

    async with get_async_session() as session:
        user = await session.get(Users, auth.user_id)
        return to_user_type(user) if user else None


async def login(info: strawberry.Info, email: str, password: str) -> AuthPayload:
    from ..types.user import AuthPayload

    async with get_async_session() as session:
        sessions = get_session_manager(info, session)
        pair = await sessions.login(email, password)

    return AuthPayload(access_token=pair.access_token, refresh_token=pair.refresh_token)


async def register(info: strawberry.Info, username: str, email: str, password: str) -> User:
    from .user import to_user_type

    async with get_async_session() as session:
        sessions = get_session_manager(info, session)
        user = await sessions.register(username, email, password)

    logger.info("User registered", user_id=str(user.id))
    return to_user_type(user)


async def refresh_tokens(info: strawberry.Info, token: str, refresh_token: str) -> AuthPayload:
    from ..types.user import AuthPayload

    async with get_async_session() as session:
        sessions = get_session_manager(info, session)
        pair = await sessions.refresh_tokens(token, refresh_token)

    return AuthPayload(access_token=pair.access_token, refresh_token=pair.refresh_token)


async def forget_password(info: strawberry.Info, user_id: UUID, new_password: str) -> bool:
    """Reset a password. Reports failure as ``False`` instead of a GraphQL error."""
    try:
        async with get_async_session() as session:
            sessions = get_session_manager(info, session)
            return await sessions.reset_password(user_id, new_password)
    except Exception as e:
        logger.warning("forgetPassword failed", user_id=str(user_id), error=str(e))
        return False
