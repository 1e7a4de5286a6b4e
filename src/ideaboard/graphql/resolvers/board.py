from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

import strawberry
from sqlalchemy import select

from ...database.connection import get_async_session
from ...dbmodels import Boards
from ...logging import get_logger
from ..access_control import require_authenticated

if TYPE_CHECKING:
    from ..types.board import Board
    from ..types.suggestion import Suggestion

logger = get_logger(__name__)


def to_board_type(board: Boards) -> Board:
    from ..types.board import Board as BoardType

    return BoardType(
        id=board.id,
        name=board.name,
        owner=board.owner,
        created_at=board.created_at,
    )


async def resolve_boards_by_owner(info: strawberry.Info, owner: UUID) -> list[Board]:
    """Boards owned by ``owner``, oldest first."""
    async with get_async_session() as session:
        stmt = select(Boards).where(Boards.owner == owner).order_by(Boards.id)
        result = await session.execute(stmt)
        return [to_board_type(board) for board in result.scalars().all()]


async def resolve_board_suggestions(board: Board, info: strawberry.Info) -> list[Suggestion]:
    from .suggestion import to_suggestion_type

    suggestions = await info.context["loaders"].suggestion_loader.load(board.id)
    return [to_suggestion_type(s) for s in suggestions]


async def create_board(info: strawberry.Info, name: str, owner: UUID | None = None) -> Board:
    """Create a board owned by ``owner``, defaulting to the caller."""
    auth = require_authenticated(info)

    async with get_async_session() as session:
        board = Boards(name=name, owner=owner or auth.user_id)
        session.add(board)
        await session.commit()
        await session.refresh(board)

        logger.info("Board created", board_id=board.id, owner=str(board.owner))
        return to_board_type(board)
