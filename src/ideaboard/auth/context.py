"""Authentication context for request handling."""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from .tokens import TokenPair


@dataclass(frozen=True)
class AuthContext:
    """Runtime authentication context for a request."""

    user_id: UUID | None
    is_admin: bool = False
    token: str | None = None
    # Set when an expired access token was rotated while building the context
    refreshed: TokenPair | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


ANONYMOUS = AuthContext(user_id=None)
