from collections import defaultdict
from uuid import UUID

from sqlalchemy import select
from strawberry.dataloader import DataLoader

from ..database.connection import get_async_session
from ..dbmodels import Suggestions, Users


async def load_suggestions_by_board(keys: list[int]) -> list[list[Suggestions]]:
    """Batch load the suggestions of several boards in one query."""
    async with get_async_session() as session:
        stmt = (
            select(Suggestions)
            .where(Suggestions.board_id.in_(keys))
            .order_by(Suggestions.id)
        )
        result = await session.execute(stmt)
        by_board: dict[int, list[Suggestions]] = defaultdict(list)
        for suggestion in result.scalars().all():
            by_board[suggestion.board_id].append(suggestion)
        return [by_board.get(key, []) for key in keys]


async def load_users(keys: list[UUID]) -> list[Users | None]:
    """Batch load users by ID."""
    async with get_async_session() as session:
        stmt = select(Users).where(Users.id.in_(keys))
        result = await session.execute(stmt)
        users_map = {user.id: user for user in result.scalars().all()}
        return [users_map.get(key) for key in keys]


class Loaders:
    """DataLoaders scoped to a single GraphQL request."""

    def __init__(self):
        self.suggestion_loader = DataLoader(load_fn=load_suggestions_by_board)
        self.user_loader = DataLoader(load_fn=load_users)
