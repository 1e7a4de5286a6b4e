"""
Suggestion GraphQL type definitions
"""

from datetime import datetime
from typing import TYPE_CHECKING, Annotated
from uuid import UUID

import strawberry

if TYPE_CHECKING:
    from .user import User


@strawberry.type
class Suggestion:
    id: int
    text: str
    creator_id: UUID
    board_id: int
    created_at: datetime | None

    @strawberry.field
    async def creator(
        self, info: strawberry.Info
    ) -> Annotated["User", strawberry.lazy(".user")] | None:
        """Get the user who made this suggestion."""
        from ..resolvers.suggestion import resolve_suggestion_creator

        return await resolve_suggestion_creator(self, info)
