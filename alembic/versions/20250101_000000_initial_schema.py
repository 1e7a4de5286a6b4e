"""
Initial schema: users, boards, suggestions, books catalog and champions.

Revision ID: 20250101_000000_initial_schema
Revises:
Create Date: 2025-01-01 00:00:00
"""

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op  # type: ignore[reportMissingImports]

# revision identifiers, used by Alembic.
revision = "20250101_000000_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _timestamp(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        server_default=sa.text("CURRENT_TIMESTAMP"),
    )


def upgrade() -> None:
    # Required extension for uuid_generate_v4
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp";')

    op.create_table(
        "users",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("uuid_generate_v4()"),
        ),
        sa.Column("username", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password", sa.String(length=255), nullable=True),
        sa.Column("is_admin", sa.Boolean(), server_default=sa.text("false")),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id", name="users_pkey"),
        sa.UniqueConstraint("username", name="users_username_key"),
        sa.UniqueConstraint("email", name="users_email_key"),
    )

    op.create_table(
        "boards",
        sa.Column("id", sa.Integer(), autoincrement=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("owner", postgresql.UUID(as_uuid=True), nullable=False),
        _timestamp("created_at"),
        sa.ForeignKeyConstraint(
            ["owner"], ["users.id"], ondelete="CASCADE", name="boards_owner_fkey"
        ),
        sa.PrimaryKeyConstraint("id", name="boards_pkey"),
    )
    op.create_index("idx_boards_owner", "boards", ["owner"])

    op.create_table(
        "suggestions",
        sa.Column("id", sa.Integer(), autoincrement=True),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("creator_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("board_id", sa.Integer(), nullable=False),
        _timestamp("created_at"),
        sa.ForeignKeyConstraint(
            ["creator_id"], ["users.id"], ondelete="CASCADE", name="suggestions_creator_id_fkey"
        ),
        sa.ForeignKeyConstraint(
            ["board_id"], ["boards.id"], ondelete="CASCADE", name="suggestions_board_id_fkey"
        ),
        sa.PrimaryKeyConstraint("id", name="suggestions_pkey"),
    )
    op.create_index("idx_suggestions_board", "suggestions", ["board_id"])
    op.create_index("idx_suggestions_creator", "suggestions", ["creator_id"])

    op.create_table(
        "books",
        sa.Column("id", sa.Integer(), autoincrement=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.PrimaryKeyConstraint("id", name="books_pkey"),
    )

    op.create_table(
        "authors",
        sa.Column("id", sa.Integer(), autoincrement=True),
        sa.Column("first_name", sa.String(length=255), nullable=False),
        sa.Column("last_name", sa.String(length=255), nullable=False),
        sa.PrimaryKeyConstraint("id", name="authors_pkey"),
    )

    op.create_table(
        "book_authors",
        sa.Column("book_id", sa.Integer(), nullable=False),
        sa.Column("author_id", sa.Integer(), nullable=False),
        sa.Column("primary", sa.Boolean(), server_default=sa.text("false")),
        sa.ForeignKeyConstraint(
            ["book_id"], ["books.id"], ondelete="CASCADE", name="book_authors_book_id_fkey"
        ),
        sa.ForeignKeyConstraint(
            ["author_id"], ["authors.id"], ondelete="CASCADE", name="book_authors_author_id_fkey"
        ),
        sa.PrimaryKeyConstraint("book_id", "author_id", name="book_authors_pkey"),
    )

    op.create_table(
        "champions",
        sa.Column("id", sa.Integer(), autoincrement=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("picture_url", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="champions_pkey"),
    )


def downgrade() -> None:
    op.drop_table("champions")
    op.drop_table("book_authors")
    op.drop_table("authors")
    op.drop_table("books")
    op.drop_index("idx_suggestions_creator", table_name="suggestions")
    op.drop_index("idx_suggestions_board", table_name="suggestions")
    op.drop_table("suggestions")
    op.drop_index("idx_boards_owner", table_name="boards")
    op.drop_table("boards")
    op.drop_table("users")
