"""
Books catalog GraphQL type definitions
"""

from __future__ import annotations

import strawberry


@strawberry.type
class Author:
    id: int
    first_name: str
    last_name: str
    books: list[Book] = strawberry.field(default_factory=list)


@strawberry.type
class Book:
    id: int
    title: str
    authors: list[Author] = strawberry.field(default_factory=list)


@strawberry.type
class Champion:
    id: int
    name: str
    picture_url: str | None = None
