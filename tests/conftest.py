"""
Shared pytest fixtures and configuration for all tests.
"""

import os
from collections.abc import Generator
from datetime import UTC, datetime
from typing import Any
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
import strawberry

from ideaboard.auth.context import ANONYMOUS, AuthContext
from ideaboard.auth.errors import StoreError
from ideaboard.auth.passwords import PasswordHasher
from ideaboard.auth.sessions import SessionManager
from ideaboard.auth.tokens import TokenIssuer
from ideaboard.dbmodels import Users
from ideaboard.events import EventBus

ACCESS_SECRET = "test-access-secret"
REFRESH_SECRET = "test-refresh-secret"


class InMemoryCredentialStore:
    """CredentialStore keeping Users rows in a list.

    Enforces the unique username/email constraints and can be told to fail
    reads or writes to exercise the error paths.
    """

    def __init__(self) -> None:
        self.users: list[Users] = []
        self.fail_reads = False
        self.fail_writes = False

    def _matches(self, user: Users, filters: dict[str, Any]) -> bool:
        return all(getattr(user, key) == value for key, value in filters.items())

    async def find_one(self, **filters: Any) -> Users | None:
        if self.fail_reads:
            raise StoreError("User lookup failed")
        return next((u for u in self.users if self._matches(u, filters)), None)

    async def create(self, **fields: Any) -> Users:
        if self.fail_writes:
            raise StoreError("User creation failed")
        for existing in self.users:
            if existing.email == fields.get("email") or existing.username == fields.get(
                "username"
            ):
                raise StoreError("User creation failed")
        fields.setdefault("is_admin", False)
        now = datetime.now(UTC)
        user = Users(id=uuid4(), created_at=now, updated_at=now, **fields)
        self.users.append(user)
        return user

    async def update(self, values: dict[str, Any], **filters: Any) -> int:
        if self.fail_writes:
            raise StoreError("User update failed")
        matched = [u for u in self.users if self._matches(u, filters)]
        for user in matched:
            for key, value in values.items():
                setattr(user, key, value)
        return len(matched)

    def count(self, **filters: Any) -> int:
        return sum(1 for u in self.users if self._matches(u, filters))


@pytest.fixture
def token_issuer() -> TokenIssuer:
    return TokenIssuer(access_secret=ACCESS_SECRET, refresh_secret=REFRESH_SECRET)


@pytest.fixture
def fast_hasher() -> PasswordHasher:
    """bcrypt at its minimum cost so the suite stays quick."""
    return PasswordHasher(rounds=4)


@pytest.fixture
def store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()


@pytest.fixture
def sessions(store, token_issuer, fast_hasher) -> SessionManager:
    return SessionManager(store, token_issuer, fast_hasher)


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def make_info(token_issuer, event_bus):
    """Build a mock GraphQL info object carrying the given AuthContext."""

    def _make(auth: AuthContext = ANONYMOUS, **extra: Any) -> MagicMock:
        info = MagicMock(spec=strawberry.Info)
        info.context = {
            "auth": auth,
            "tokens": token_issuer,
            "events": event_bus,
            "loaders": MagicMock(),
            **extra,
        }
        return info

    return _make


@pytest.fixture
def user_auth() -> AuthContext:
    return AuthContext(user_id=uuid4(), is_admin=False, token="user-token")


@pytest.fixture
def admin_auth() -> AuthContext:
    return AuthContext(user_id=uuid4(), is_admin=True, token="admin-token")


@pytest.fixture(autouse=True)
def reset_environment() -> Generator[None, None, None]:
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)
