from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

import strawberry
from sqlalchemy import select

from ...database.connection import get_async_session
from ...dbmodels import Suggestions
from ...logging import get_logger
from ..access_control import require_authenticated

if TYPE_CHECKING:
    from ..types.suggestion import Suggestion
    from ..types.user import User

logger = get_logger(__name__)

# Ids start at 1, so -1 means "from the beginning"
NO_CURSOR = -1


def to_suggestion_type(suggestion: Suggestions) -> Suggestion:
    from ..types.suggestion import Suggestion as SuggestionType

    return SuggestionType(
        id=suggestion.id,
        text=suggestion.text,
        creator_id=suggestion.creator_id,
        board_id=suggestion.board_id,
        created_at=suggestion.created_at,
    )


async def resolve_suggestions(info: strawberry.Info) -> list[Suggestion]:
    async with get_async_session() as session:
        result = await session.execute(select(Suggestions).order_by(Suggestions.id))
        return [to_suggestion_type(s) for s in result.scalars().all()]


async def resolve_some_suggestions(
    info: strawberry.Info, limit: int | None, offset: int | None
) -> list[Suggestion]:
    """Offset pagination."""
    stmt = select(Suggestions).order_by(Suggestions.id)
    if limit is not None:
        stmt = stmt.limit(limit)
    if offset:
        stmt = stmt.offset(offset)

    async with get_async_session() as session:
        result = await session.execute(stmt)
        return [to_suggestion_type(s) for s in result.scalars().all()]


async def resolve_suggestions_after(
    info: strawberry.Info, limit: int | None, cursor: int | None
) -> list[Suggestion]:
    """Cursor pagination: suggestions whose id is greater than ``cursor``."""
    stmt = (
        select(Suggestions)
        .where(Suggestions.id > (cursor if cursor is not None else NO_CURSOR))
        .order_by(Suggestions.id)
    )
    if limit is not None:
        stmt = stmt.limit(limit)

    async with get_async_session() as session:
        result = await session.execute(stmt)
        return [to_suggestion_type(s) for s in result.scalars().all()]


async def search_suggestions(
    info: strawberry.Info, query: str, limit: int | None, cursor: int | None
) -> list[Suggestion]:
    """Case-insensitive substring search with cursor pagination."""
    stmt = (
        select(Suggestions)
        .where(
            Suggestions.text.ilike(f"%{query}%"),
            Suggestions.id > (cursor if cursor is not None else NO_CURSOR),
        )
        .order_by(Suggestions.id)
    )
    if limit is not None:
        stmt = stmt.limit(limit)

    async with get_async_session() as session:
        result = await session.execute(stmt)
        return [to_suggestion_type(s) for s in result.scalars().all()]


async def resolve_suggestions_by_creator(
    info: strawberry.Info, creator_id: UUID
) -> list[Suggestion]:
    async with get_async_session() as session:
        stmt = (
            select(Suggestions)
            .where(Suggestions.creator_id == creator_id)
            .order_by(Suggestions.id)
        )
        result = await session.execute(stmt)
        return [to_suggestion_type(s) for s in result.scalars().all()]


async def resolve_suggestion_creator(suggestion: Suggestion, info: strawberry.Info) -> User | None:
    from .user import to_user_type

    user = await info.context["loaders"].user_loader.load(suggestion.creator_id)
    return to_user_type(user) if user else None


async def create_suggestion(
    info: strawberry.Info, text: str, board_id: int, creator_id: UUID | None = None
) -> Suggestion:
    """Post a suggestion to a board, attributed to the caller by default."""
    auth = require_authenticated(info)

    async with get_async_session() as session:
        suggestion = Suggestions(
            text=text,
            board_id=board_id,
            creator_id=creator_id or auth.user_id,
        )
        session.add(suggestion)
        await session.commit()
        await session.refresh(suggestion)

        logger.info("Suggestion created", suggestion_id=suggestion.id, board_id=board_id)
        return to_suggestion_type(suggestion)
