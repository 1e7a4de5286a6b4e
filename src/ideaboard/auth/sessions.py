"""Session lifecycle: login, registration, token refresh and password reset."""

from __future__ import annotations

import secrets
from uuid import UUID

from ..config import settings
from ..dbmodels import Users
from ..logging import get_logger
from .errors import InvalidCredentials
from .passwords import PasswordHasher
from .store import CredentialStore
from .tokens import TokenIssuer, TokenPair

logger = get_logger(__name__)


class SessionManager:
    """Orchestrates the account and session operations.

    An account is *unclaimed* while its password hash is NULL and becomes
    *claimed* once ``register`` sets one. Nothing moves an account back.

    Every operation propagates failures except ``reset_password``, which
    reports success as a boolean and never raises.
    """

    def __init__(
        self,
        store: CredentialStore,
        tokens: TokenIssuer,
        hasher: PasswordHasher | None = None,
    ):
        self.store = store
        self.tokens = tokens
        self.hasher = hasher or PasswordHasher.from_settings(settings)

    async def login(self, email: str, password: str) -> TokenPair:
        """Exchange an email and password for a fresh token pair.

        Raises:
            InvalidCredentials: Unknown email, unclaimed account or wrong password
        """
        user = await self.store.find_one(email=email)
        if user is None or not user.is_claimed:
            # Costs one bcrypt check, like a wrong password
            await self.hasher.verify_dummy(password)
            logger.info("Login failed: unknown email or unclaimed account")
            raise InvalidCredentials()

        if not await self.hasher.verify(password, user.password):
            logger.info("Login failed: bad password", user_id=str(user.id))
            raise InvalidCredentials()

        logger.info("User logged in", user_id=str(user.id))
        return self.tokens.create_tokens(user)

    async def register(self, username: str, email: str, password: str) -> Users:
        """Create an account, or claim the unclaimed one registered to ``email``.

        A claimed account with the same email is never overwritten: the
        create path runs instead and the store rejects the duplicate email.
        """
        if not username or not email or not password:
            raise ValueError("username, email and password are required")

        previous_account = await self.store.find_one(email=email, password=None)
        hashed_password = await self.hasher.hash(password)

        if previous_account is not None:
            # The password=None filter stops two concurrent claims both winning.
            claimed = await self.store.update(
                {"username": username, "password": hashed_password},
                id=previous_account.id,
                password=None,
            )
            if claimed:
                logger.info("Claimed provisioned account", user_id=str(previous_account.id))
                user = await self.store.find_one(id=previous_account.id)
                if user is not None:
                    return user
            logger.info("Provisioned account was claimed concurrently", email=email)

        return await self.store.create(username=username, email=email, password=hashed_password)

    async def refresh_tokens(self, token: str, refresh_token: str) -> TokenPair:
        """Rotate a token pair.

        Raises:
            InvalidToken: Malformed, expired or tampered tokens, unknown user,
                or tokens issued to different users
        """

        async def load_user(user_id: UUID) -> Users | None:
            return await self.store.find_one(id=user_id)

        pair = await self.tokens.refresh(token, refresh_token, load_user)
        logger.info("Tokens refreshed")
        return pair

    async def reset_password(self, user_id: UUID, new_password: str) -> bool:
        """Set a new password for a claimed account; ``False`` on any failure."""
        try:
            if not new_password:
                return False

            user = await self.store.find_one(id=user_id)
            if user is None or not user.is_claimed:
                logger.info("Password reset refused", user_id=str(user_id))
                return False

            hashed_password = await self.hasher.hash(new_password)
            updated = await self.store.update({"password": hashed_password}, id=user_id)
            return updated > 0
        except Exception as e:
            logger.warning("Password reset failed", user_id=str(user_id), error=str(e))
            return False

    async def create_user(self, username: str, email: str, is_admin: bool = False) -> Users:
        """Administrative account creation.

        The account gets a random password nobody knows, hashed like any
        other, so it cannot be logged into until the password is reset.
        """
        placeholder = secrets.token_urlsafe(32)
        hashed_password = await self.hasher.hash(placeholder)
        return await self.store.create(
            username=username, email=email, password=hashed_password, is_admin=is_admin
        )

    async def provision_user(self, username: str, email: str) -> Users:
        """Create an unclaimed account that ``register`` can later claim."""
        return await self.store.create(username=username, email=email, password=None)
