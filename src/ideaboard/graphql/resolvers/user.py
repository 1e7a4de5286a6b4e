from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

import strawberry
from sqlalchemy import select

from ...auth.errors import AuthorizationError
from ...auth.store import SqlCredentialStore
from ...database.connection import get_async_session
from ...dbmodels import Users
from ...events import USER_ADDED
from ...logging import get_logger
from ..access_control import (
    get_event_bus,
    get_session_manager,
    require_admin,
    require_authenticated,
)

if TYPE_CHECKING:
    from ..types.user import User

logger = get_logger(__name__)


def to_user_type(user: Users) -> User:
    """Convert a Users row to the GraphQL User type."""
    from ..types.user import User as UserType

    return UserType(
        id=user.id,
        username=user.username,
        email=user.email,
        is_admin=bool(user.is_admin),
        created_at=user.created_at,
    )


async def resolve_all_users(info: strawberry.Info) -> list[User]:
    require_authenticated(info)

    async with get_async_session() as session:
        result = await session.execute(select(Users).order_by(Users.created_at))
        return [to_user_type(user) for user in result.scalars().all()]


async def resolve_user_by_id(info: strawberry.Info, id: UUID) -> User | None:
    user = await info.context["loaders"].user_loader.load(id)
    return to_user_type(user) if user else None


async def create_user(
    info: strawberry.Info, username: str, email: str, is_admin: bool = False
) -> User:
    """Administrative account creation (admin only); announces the new user to subscribers."""
    auth = require_admin(info)

    async with get_async_session() as session:
        sessions = get_session_manager(info, session)
        user = await sessions.create_user(username, email, is_admin=is_admin)

    user_added = to_user_type(user)
    delivered = get_event_bus(info).publish(USER_ADDED, user_added)
    logger.info(
        "User created",
        user_id=str(user.id),
        by=str(auth.user_id),
        subscribers_notified=delivered,
    )
    return user_added


async def rename_user(info: strawberry.Info, username: str, new_username: str) -> int:
    """Rename exactly the user called ``username``; returns the affected row count.

    Admins may rename anyone, other users only themselves.
    """
    auth = require_authenticated(info)

    async with get_async_session() as session:
        store = SqlCredentialStore(session)
        target = await store.find_one(username=username)
        if target is None:
            return 0
        if not auth.is_admin and target.id != auth.user_id:
            raise AuthorizationError("Cannot rename another user")
        return await store.update({"username": new_username}, id=target.id)


async def delete_user_by_id(info: strawberry.Info, id: UUID) -> int:
    """Delete one user by primary key (admin only); returns the affected row count."""
    auth = require_admin(info)

    async with get_async_session() as session:
        deleted = await SqlCredentialStore(session).delete(id=id)

    logger.info("User deleted", target_user_id=str(id), by=str(auth.user_id), rows=deleted)
    return deleted
