"""
Board GraphQL type definitions
"""

from datetime import datetime
from typing import TYPE_CHECKING, Annotated
from uuid import UUID

import strawberry

if TYPE_CHECKING:
    from .suggestion import Suggestion


@strawberry.type
class Board:
    """Board type for GraphQL API."""

    id: int
    name: str
    owner: UUID
    created_at: datetime | None

    @strawberry.field
    async def suggestions(
        self, info: strawberry.Info
    ) -> list[Annotated["Suggestion", strawberry.lazy(".suggestion")]]:
        """Get suggestions posted to this board (batched per request)."""
        from ..resolvers.board import resolve_board_suggestions

        return await resolve_board_suggestions(self, info)
