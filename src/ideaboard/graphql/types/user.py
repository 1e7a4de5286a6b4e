"""
User GraphQL type definitions
"""

from datetime import datetime
from typing import TYPE_CHECKING, Annotated
from uuid import UUID

import strawberry

if TYPE_CHECKING:
    from .board import Board
    from .suggestion import Suggestion


@strawberry.type
class User:
    """User type for GraphQL API. The password hash is never exposed."""

    id: UUID
    username: str
    email: str
    is_admin: bool
    created_at: datetime | None

    @strawberry.field
    async def boards(
        self, info: strawberry.Info
    ) -> list[Annotated["Board", strawberry.lazy(".board")]]:
        """Get boards owned by this user."""
        from ..resolvers.board import resolve_boards_by_owner

        return await resolve_boards_by_owner(info, self.id)

    @strawberry.field
    async def suggestions(
        self, info: strawberry.Info
    ) -> list[Annotated["Suggestion", strawberry.lazy(".suggestion")]]:
        """Get suggestions created by this user."""
        from ..resolvers.suggestion import resolve_suggestions_by_creator

        return await resolve_suggestions_by_creator(info, self.id)


@strawberry.type
class AuthPayload:
    """Access/refresh token pair returned by login and refreshTokens."""

    access_token: str
    refresh_token: str
