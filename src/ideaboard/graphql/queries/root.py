"""
Root GraphQL query definitions
"""

from uuid import UUID

import strawberry

from ..types.board import Board
from ..types.catalog import Author, Book, Champion
from ..types.suggestion import Suggestion
from ..types.user import User


@strawberry.type
class Query:
    """Root GraphQL query type."""

    # Users
    @strawberry.field
    async def me(self, info: strawberry.Info) -> User | None:
        """Get the current authenticated user."""
        from ..resolvers.auth import resolve_current_user

        return await resolve_current_user(info)

    @strawberry.field(name="allUsers")
    async def all_users(self, info: strawberry.Info) -> list[User]:
        """List every user (authentication required)."""
        from ..resolvers.user import resolve_all_users

        return await resolve_all_users(info)

    @strawberry.field(name="getUser")
    async def get_user(self, info: strawberry.Info, id: UUID) -> User | None:
        from ..resolvers.user import resolve_user_by_id

        return await resolve_user_by_id(info, id)

    # Boards and suggestions
    @strawberry.field(name="userBoards")
    async def user_boards(self, info: strawberry.Info, owner: UUID) -> list[Board]:
        from ..resolvers.board import resolve_boards_by_owner

        return await resolve_boards_by_owner(info, owner)

    @strawberry.field(name="userSuggestions")
    async def user_suggestions(self, info: strawberry.Info, creator_id: UUID) -> list[Suggestion]:
        from ..resolvers.suggestion import resolve_suggestions_by_creator

        return await resolve_suggestions_by_creator(info, creator_id)

    @strawberry.field
    async def suggestions(self, info: strawberry.Info) -> list[Suggestion]:
        from ..resolvers.suggestion import resolve_suggestions

        return await resolve_suggestions(info)

    @strawberry.field(name="someSuggestions")
    async def some_suggestions(
        self, info: strawberry.Info, limit: int | None = None, offset: int | None = None
    ) -> list[Suggestion]:
        """Offset-paginated suggestions."""
        from ..resolvers.suggestion import resolve_some_suggestions

        return await resolve_some_suggestions(info, limit, offset)

    @strawberry.field(name="someSuggestions2")
    async def some_suggestions2(
        self, info: strawberry.Info, limit: int | None = None, cursor: int | None = None
    ) -> list[Suggestion]:
        """Cursor-paginated suggestions."""
        from ..resolvers.suggestion import resolve_suggestions_after

        return await resolve_suggestions_after(info, limit, cursor)

    @strawberry.field(name="searchSuggestions")
    async def search_suggestions(
        self,
        info: strawberry.Info,
        query: str,
        limit: int | None = None,
        cursor: int | None = None,
    ) -> list[Suggestion]:
        from ..resolvers.suggestion import search_suggestions

        return await search_suggestions(info, query, limit, cursor)

    # Catalog
    @strawberry.field(name="searchBooks")
    async def search_books(self, info: strawberry.Info, title: str) -> list[Book]:
        from ..resolvers.catalog import search_books

        return await search_books(info, title)

    @strawberry.field(name="allBooks")
    async def all_books(
        self, info: strawberry.Info, limit: int | None = None, offset: int | None = None
    ) -> list[Book]:
        from ..resolvers.catalog import resolve_all_books

        return await resolve_all_books(info, limit, offset)

    @strawberry.field(name="getBook")
    async def get_book(self, info: strawberry.Info, id: int) -> Book | None:
        """Get a book by ID (authentication required)."""
        from ..resolvers.catalog import resolve_book_by_id

        return await resolve_book_by_id(info, id)

    @strawberry.field(name="allAuthors")
    async def all_authors(self, info: strawberry.Info) -> list[Author]:
        from ..resolvers.catalog import resolve_all_authors

        return await resolve_all_authors(info)

    @strawberry.field(name="getChampion")
    async def get_champion(self, info: strawberry.Info, id: int) -> Champion | None:
        from ..resolvers.catalog import resolve_champion

        return await resolve_champion(info, id)
