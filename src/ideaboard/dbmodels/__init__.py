"""
Database models for ideaboard (authoritative ORM definitions).

This module defines the SQLAlchemy Base with a naming convention for stable
Alembic autogenerate diffs, and exposes `target_metadata` for Alembic.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKeyConstraint,
    Index,
    Integer,
    MetaData,
    PrimaryKeyConstraint,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    text as sa_text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

# Naming convention for deterministic constraint/index names in Alembic diffs
naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Base class for all database models with type checking support."""

    metadata = MetaData(naming_convention=naming_convention)


class Users(Base):
    __tablename__ = "users"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="users_pkey"),
        UniqueConstraint("username", name="users_username_key"),
        UniqueConstraint("email", name="users_email_key"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, server_default=sa_text("uuid_generate_v4()"))
    username: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    # bcrypt hash; NULL marks a provisioned account nobody has claimed yet
    password: Mapped[str | None] = mapped_column(String(255))
    is_admin: Mapped[bool] = mapped_column(Boolean, server_default=sa_text("false"))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(True), server_default=sa_text("CURRENT_TIMESTAMP")
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(True), server_default=sa_text("CURRENT_TIMESTAMP")
    )

    boards: Mapped[list["Boards"]] = relationship(
        "Boards", uselist=True, back_populates="owner_user"
    )
    suggestions: Mapped[list["Suggestions"]] = relationship(
        "Suggestions", uselist=True, back_populates="creator"
    )

    @property
    def is_claimed(self) -> bool:
        return self.password is not None


class Boards(Base):
    __tablename__ = "boards"
    __table_args__ = (
        ForeignKeyConstraint(["owner"], ["users.id"], ondelete="CASCADE", name="boards_owner_fkey"),
        PrimaryKeyConstraint("id", name="boards_pkey"),
        Index("idx_boards_owner", "owner"),
    )

    id: Mapped[int] = mapped_column(Integer, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    owner: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(True), server_default=sa_text("CURRENT_TIMESTAMP")
    )

    owner_user: Mapped["Users"] = relationship("Users", back_populates="boards")
    suggestions: Mapped[list["Suggestions"]] = relationship(
        "Suggestions", uselist=True, back_populates="board"
    )


class Suggestions(Base):
    __tablename__ = "suggestions"
    __table_args__ = (
        ForeignKeyConstraint(
            ["creator_id"], ["users.id"], ondelete="CASCADE", name="suggestions_creator_id_fkey"
        ),
        ForeignKeyConstraint(
            ["board_id"], ["boards.id"], ondelete="CASCADE", name="suggestions_board_id_fkey"
        ),
        PrimaryKeyConstraint("id", name="suggestions_pkey"),
        Index("idx_suggestions_board", "board_id"),
        Index("idx_suggestions_creator", "creator_id"),
    )

    # Integer ids double as the pagination cursor
    id: Mapped[int] = mapped_column(Integer, autoincrement=True)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    creator_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    board_id: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(True), server_default=sa_text("CURRENT_TIMESTAMP")
    )

    creator: Mapped["Users"] = relationship("Users", back_populates="suggestions")
    board: Mapped["Boards"] = relationship("Boards", back_populates="suggestions")


class Books(Base):
    __tablename__ = "books"
    __table_args__ = (PrimaryKeyConstraint("id", name="books_pkey"),)

    id: Mapped[int] = mapped_column(Integer, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)

    book_authors: Mapped[list["BookAuthors"]] = relationship(
        "BookAuthors", uselist=True, back_populates="book"
    )


class Authors(Base):
    __tablename__ = "authors"
    __table_args__ = (PrimaryKeyConstraint("id", name="authors_pkey"),)

    id: Mapped[int] = mapped_column(Integer, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)

    book_authors: Mapped[list["BookAuthors"]] = relationship(
        "BookAuthors", uselist=True, back_populates="author"
    )


class BookAuthors(Base):
    __tablename__ = "book_authors"
    __table_args__ = (
        ForeignKeyConstraint(
            ["book_id"], ["books.id"], ondelete="CASCADE", name="book_authors_book_id_fkey"
        ),
        ForeignKeyConstraint(
            ["author_id"], ["authors.id"], ondelete="CASCADE", name="book_authors_author_id_fkey"
        ),
        PrimaryKeyConstraint("book_id", "author_id", name="book_authors_pkey"),
    )

    book_id: Mapped[int] = mapped_column(Integer, nullable=False)
    author_id: Mapped[int] = mapped_column(Integer, nullable=False)
    primary: Mapped[bool] = mapped_column(Boolean, server_default=sa_text("false"))

    book: Mapped["Books"] = relationship("Books", back_populates="book_authors")
    author: Mapped["Authors"] = relationship("Authors", back_populates="book_authors")


class Champions(Base):
    __tablename__ = "champions"
    __table_args__ = (PrimaryKeyConstraint("id", name="champions_pkey"),)

    id: Mapped[int] = mapped_column(Integer, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    picture_url: Mapped[str | None] = mapped_column(Text)


target_metadata = Base.metadata
