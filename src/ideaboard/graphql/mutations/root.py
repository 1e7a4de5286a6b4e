"""
Root GraphQL mutation definitions
"""

from uuid import UUID

import strawberry

from ..types.board import Board
from ..types.catalog import Author, Book, Champion
from ..types.suggestion import Suggestion
from ..types.user import AuthPayload, User


@strawberry.type
class Mutation:
    """Root GraphQL mutation type."""

    # Session lifecycle
    @strawberry.mutation
    async def login(self, info: strawberry.Info, email: str, password: str) -> AuthPayload:
        """Exchange credentials for an access/refresh token pair."""
        from ..resolvers.auth import login

        return await login(info, email, password)

    @strawberry.mutation
    async def register(
        self, info: strawberry.Info, username: str, email: str, password: str
    ) -> User:
        """Create an account or claim a provisioned one."""
        from ..resolvers.auth import register

        return await register(info, username, email, password)

    @strawberry.mutation(name="refreshTokens")
    async def refresh_tokens(
        self, info: strawberry.Info, token: str, refresh_token: str
    ) -> AuthPayload:
        """Rotate an access/refresh token pair."""
        from ..resolvers.auth import refresh_tokens

        return await refresh_tokens(info, token, refresh_token)

    @strawberry.mutation(name="forgetPassword")
    async def forget_password(
        self, info: strawberry.Info, user_id: UUID, new_password: str
    ) -> bool:
        """Set a new password; false on any failure."""
        from ..resolvers.auth import forget_password

        return await forget_password(info, user_id, new_password)

    # User administration
    @strawberry.mutation(name="createUser")
    async def create_user(
        self, info: strawberry.Info, username: str, email: str, is_admin: bool = False
    ) -> User:
        """Create a user (admin only) and publish it on the userAdded subscription."""
        from ..resolvers.user import create_user

        return await create_user(info, username, email, is_admin)

    @strawberry.mutation(name="updateUser")
    async def update_user(
        self, info: strawberry.Info, username: str, new_username: str
    ) -> int:
        """Rename a user; returns the number of rows changed."""
        from ..resolvers.user import rename_user

        return await rename_user(info, username, new_username)

    @strawberry.mutation(name="deleteUser")
    async def delete_user(self, info: strawberry.Info, id: UUID) -> int:
        """Delete a user by ID; returns the number of rows removed."""
        from ..resolvers.user import delete_user_by_id

        return await delete_user_by_id(info, id)

    # Boards and suggestions
    @strawberry.mutation(name="createBoard")
    async def create_board(
        self, info: strawberry.Info, name: str, owner: UUID | None = None
    ) -> Board:
        from ..resolvers.board import create_board

        return await create_board(info, name, owner)

    @strawberry.mutation(name="createSuggestion")
    async def create_suggestion(
        self,
        info: strawberry.Info,
        text: str,
        board_id: int,
        creator_id: UUID | None = None,
    ) -> Suggestion:
        from ..resolvers.suggestion import create_suggestion

        return await create_suggestion(info, text, board_id, creator_id)

    # Catalog
    @strawberry.mutation(name="createBook")
    async def create_book(self, info: strawberry.Info, title: str) -> Book:
        from ..resolvers.catalog import create_book

        return await create_book(info, title)

    @strawberry.mutation(name="createAuthor")
    async def create_author(
        self, info: strawberry.Info, first_name: str, last_name: str
    ) -> Author:
        from ..resolvers.catalog import create_author

        return await create_author(info, first_name, last_name)

    @strawberry.mutation(name="addBookAuthor")
    async def add_book_author(
        self, info: strawberry.Info, book_id: int, author_id: int, primary: bool = False
    ) -> bool:
        from ..resolvers.catalog import add_book_author

        return await add_book_author(info, book_id, author_id, primary)

    @strawberry.mutation(name="createChampion")
    async def create_champion(
        self, info: strawberry.Info, name: str, picture_url: str | None = None
    ) -> Champion:
        from ..resolvers.catalog import create_champion

        return await create_champion(info, name, picture_url)
