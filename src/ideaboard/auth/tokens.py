"""JWT access/refresh token issuing and verification."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, Literal, Protocol
from uuid import UUID

import jwt
from jwt.exceptions import InvalidTokenError

from ..config import Settings, get_token_secrets
from ..logging import get_logger
from .errors import InvalidToken

logger = get_logger(__name__)

TokenType = Literal["access", "refresh"]


class TokenSubject(Protocol):
    """What the issuer needs to know about a user."""

    id: UUID
    is_admin: bool | None
    password: str | None


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


class TokenIssuer:
    """Issues and verifies the two kinds of session token.

    Access tokens are signed with ``access_secret``. Refresh tokens are signed
    with ``refresh_secret`` followed by the user's current password hash, so
    changing the password invalidates every refresh token minted before it.
    """

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        algorithm: str = "HS256",
        issuer: str = "ideaboard",
        audience: str = "ideaboard-api",
        access_token_expiry: timedelta = timedelta(minutes=20),
        refresh_token_expiry: timedelta = timedelta(days=7),
    ):
        if not access_secret or not refresh_secret:
            raise ValueError("Both access and refresh secrets are required")
        if access_secret == refresh_secret:
            raise ValueError("Access and refresh secrets must differ")
        self.access_secret = access_secret
        self.refresh_secret = refresh_secret
        self.algorithm = algorithm
        self.issuer = issuer
        self.audience = audience
        self.access_token_expiry = access_token_expiry
        self.refresh_token_expiry = refresh_token_expiry

    @classmethod
    def from_settings(cls, settings: Settings) -> TokenIssuer:
        access_secret, refresh_secret = get_token_secrets(settings)
        return cls(
            access_secret=access_secret,
            refresh_secret=refresh_secret,
            algorithm=settings.jwt_algorithm,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            access_token_expiry=timedelta(minutes=settings.access_token_expiry_minutes),
            refresh_token_expiry=timedelta(days=settings.refresh_token_expiry_days),
        )

    def _refresh_key(self, password_hash: str | None) -> str:
        return f"{self.refresh_secret}{password_hash or ''}"

    def _encode(
        self, user_id: UUID, token_type: TokenType, key: str, expiry: timedelta, **claims: Any
    ) -> str:
        now = datetime.now(UTC)
        payload: dict[str, Any] = {
            "iss": self.issuer,
            "aud": self.audience,
            "iat": now,
            "nbf": now,
            "exp": now + expiry,
            "sub": str(user_id),
            "type": token_type,
            **claims,
        }
        return jwt.encode(payload, key, algorithm=self.algorithm)

    def _decode(
        self, token: str, key: str, token_type: TokenType, verify_exp: bool = True
    ) -> dict[str, Any]:
        try:
            payload = jwt.decode(
                token,
                key,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                audience=self.audience,
                options={
                    "verify_exp": verify_exp,
                    "verify_nbf": True,
                    "verify_iat": True,
                },
            )
        except InvalidTokenError as e:
            logger.info("JWT validation failed", token_type=token_type, error=str(e))
            raise InvalidToken() from e

        if payload.get("type") != token_type:
            raise InvalidToken(f"Expected a {token_type} token")
        if not payload.get("sub"):
            raise InvalidToken("Missing 'sub' claim in token")
        return payload

    def issue_access_token(self, user_id: UUID, is_admin: bool = False) -> str:
        return self._encode(
            user_id, "access", self.access_secret, self.access_token_expiry, admin=bool(is_admin)
        )

    def issue_refresh_token(self, user_id: UUID, password_hash: str | None) -> str:
        return self._encode(
            user_id, "refresh", self._refresh_key(password_hash), self.refresh_token_expiry
        )

    def create_tokens(self, user: TokenSubject) -> TokenPair:
        return TokenPair(
            access_token=self.issue_access_token(user.id, bool(user.is_admin)),
            refresh_token=self.issue_refresh_token(user.id, user.password),
        )

    def verify_access_token(self, token: str, verify_exp: bool = True) -> dict[str, Any]:
        """Return the claims of a valid access token or raise InvalidToken."""
        return self._decode(token, self.access_secret, "access", verify_exp=verify_exp)

    def verify_refresh_token(self, token: str, password_hash: str | None) -> dict[str, Any]:
        """Return the claims of a valid refresh token or raise InvalidToken."""
        return self._decode(token, self._refresh_key(password_hash), "refresh")

    def peek_subject(self, token: str) -> UUID:
        """Read the ``sub`` claim without checking the signature.

        Only used to find out which user's key a refresh token must verify
        against; the result is never trusted on its own.
        """
        try:
            payload = jwt.decode(token, options={"verify_signature": False})
            return UUID(payload["sub"])
        except (InvalidTokenError, KeyError, TypeError, ValueError) as e:
            raise InvalidToken() from e

    async def refresh(
        self,
        token: str,
        refresh_token: str,
        load_user: Callable[[UUID], Awaitable[TokenSubject | None]],
    ) -> TokenPair:
        """Rotate a token pair.

        The refresh token must carry a valid signature and be unexpired, its
        subject must still exist, and the access token (whose expiry is
        ignored) must have been issued to the same user.
        """
        user_id = self.peek_subject(refresh_token)

        user = await load_user(user_id)
        if user is None:
            logger.info("Refresh attempted for unknown user", subject=str(user_id))
            raise InvalidToken()

        self.verify_refresh_token(refresh_token, user.password)

        access_claims = self.verify_access_token(token, verify_exp=False)
        if access_claims["sub"] != str(user.id):
            logger.warning(
                "Access and refresh token subjects differ",
                access_subject=access_claims["sub"],
                refresh_subject=str(user.id),
            )
            raise InvalidToken("Token subjects do not match")

        return self.create_tokens(user)
