"""Credential store: persistence of user records for the auth layer."""

from __future__ import annotations

from typing import Any, Protocol

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..dbmodels import Users
from ..logging import get_logger
from .errors import StoreError

logger = get_logger(__name__)


class CredentialStore(Protocol):
    """Storage interface the session lifecycle depends on.

    Filters are equality matches on ``Users`` columns; ``None`` matches NULL.
    """

    async def find_one(self, **filters: Any) -> Users | None: ...

    async def create(self, **fields: Any) -> Users: ...

    async def update(self, values: dict[str, Any], **filters: Any) -> int: ...


class SqlCredentialStore:
    """CredentialStore backed by an async SQLAlchemy session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_one(self, **filters: Any) -> Users | None:
        stmt = (
            select(Users)
            .filter_by(**filters)
            .limit(1)
            .execution_options(populate_existing=True)
        )
        try:
            result = await self.db.execute(stmt)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("User lookup failed", filters=list(filters), error=str(e))
            raise StoreError("User lookup failed") from e

    async def create(self, **fields: Any) -> Users:
        user = Users(**fields)
        try:
            self.db.add(user)
            await self.db.commit()
            await self.db.refresh(user)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.warning("User creation failed", error=str(e))
            raise StoreError("User creation failed") from e

        logger.info("Created user", user_id=str(user.id))
        return user

    async def update(self, values: dict[str, Any], **filters: Any) -> int:
        """Apply ``values`` to every user matching ``filters``; return the row count."""
        if not filters:
            raise ValueError("Refusing to update users without a filter")

        stmt = (
            update(Users)
            .filter_by(**filters)
            .values(**values, updated_at=func.now())
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.db.execute(stmt)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.warning("User update failed", filters=list(filters), error=str(e))
            raise StoreError("User update failed") from e
        return result.rowcount

    async def delete(self, **filters: Any) -> int:
        if not filters:
            raise ValueError("Refusing to delete users without a filter")

        try:
            result = await self.db.execute(delete(Users).filter_by(**filters))
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.warning("User deletion failed", filters=list(filters), error=str(e))
            raise StoreError("User deletion failed") from e
        return result.rowcount
