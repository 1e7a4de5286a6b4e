"""Resolvers for the books/authors catalog and champions."""

from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from ...database.connection import get_async_session
from ...dbmodels import Authors, BookAuthors, Books, Champions
from ...logging import get_logger
from ..access_control import require_authenticated

if TYPE_CHECKING:
    from ..types.catalog import Author, Book, Champion

logger = get_logger(__name__)


def to_author_type(author: Authors, include_books: bool = False) -> Author:
    from ..types.catalog import Author as AuthorType

    books = []
    if include_books:
        books = [to_book_type(link.book) for link in author.book_authors]
    return AuthorType(
        id=author.id,
        first_name=author.first_name,
        last_name=author.last_name,
        books=books,
    )


def to_book_type(book: Books, include_authors: bool = False) -> Book:
    from ..types.catalog import Book as BookType

    authors = []
    if include_authors:
        # Primary authors first
        links = sorted(book.book_authors, key=lambda link: not link.primary)
        authors = [to_author_type(link.author) for link in links]
    return BookType(id=book.id, title=book.title, authors=authors)


def _books_with_authors():
    return select(Books).options(
        selectinload(Books.book_authors).selectinload(BookAuthors.author)
    )


async def search_books(info: strawberry.Info, title: str) -> list[Book]:
    """Books whose title contains ``title``, ignoring case."""
    stmt = _books_with_authors().where(Books.title.ilike(f"%{title}%")).order_by(Books.id)

    async with get_async_session() as session:
        result = await session.execute(stmt)
        return [to_book_type(book, include_authors=True) for book in result.scalars().all()]


async def resolve_all_books(
    info: strawberry.Info, limit: int | None = None, offset: int | None = None
) -> list[Book]:
    stmt = _books_with_authors().order_by(Books.id)
    if limit is not None:
        stmt = stmt.limit(limit)
    if offset:
        stmt = stmt.offset(offset)

    async with get_async_session() as session:
        result = await session.execute(stmt)
        return [to_book_type(book, include_authors=True) for book in result.scalars().all()]


async def resolve_book_by_id(info: strawberry.Info, id: int) -> Book | None:
    require_authenticated(info)

    async with get_async_session() as session:
        result = await session.execute(_books_with_authors().where(Books.id == id))
        book = result.scalar_one_or_none()
        return to_book_type(book, include_authors=True) if book else None


async def resolve_all_authors(info: strawberry.Info) -> list[Author]:
    stmt = (
        select(Authors)
        .options(selectinload(Authors.book_authors).selectinload(BookAuthors.book))
        .order_by(Authors.id)
    )

    async with get_async_session() as session:
        result = await session.execute(stmt)
        return [to_author_type(author, include_books=True) for author in result.scalars().all()]


async def create_book(info: strawberry.Info, title: str) -> Book:
    async with get_async_session() as session:
        book = Books(title=title)
        session.add(book)
        await session.commit()
        await session.refresh(book)
        logger.info("Book created", book_id=book.id)
        return to_book_type(book)


async def create_author(info: strawberry.Info, first_name: str, last_name: str) -> Author:
    async with get_async_session() as session:
        author = Authors(first_name=first_name, last_name=last_name)
        session.add(author)
        await session.commit()
        await session.refresh(author)
        logger.info("Author created", author_id=author.id)
        return to_author_type(author)


async def add_book_author(
    info: strawberry.Info, book_id: int, author_id: int, primary: bool = False
) -> bool:
    async with get_async_session() as session:
        session.add(BookAuthors(book_id=book_id, author_id=author_id, primary=primary))
        await session.commit()
    return True


def to_champion_type(champion: Champions) -> Champion:
    from ..types.catalog import Champion as ChampionType

    return ChampionType(id=champion.id, name=champion.name, picture_url=champion.picture_url)


async def resolve_champion(info: strawberry.Info, id: int) -> Champion | None:
    async with get_async_session() as session:
        champion = await session.get(Champions, id)
        return to_champion_type(champion) if champion else None


async def create_champion(
    info: strawberry.Info, name: str, picture_url: str | None = None
) -> Champion:
    async with get_async_session() as session:
        champion = Champions(name=name, picture_url=picture_url)
        session.add(champion)
        await session.commit()
        await session.refresh(champion)
        return to_champion_type(champion)
