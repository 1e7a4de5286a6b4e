"""Unit tests for JWT token issuing, verification and rotation."""

from datetime import timedelta
from types import SimpleNamespace
from uuid import uuid4

import jwt
import pytest

from ideaboard.auth.errors import InvalidToken
from ideaboard.auth.tokens import TokenIssuer

ACCESS_SECRET = "test-access-secret"
REFRESH_SECRET = "test-refresh-secret"


def make_user(password="$2b$04$hash-one", is_admin=False):
    return SimpleNamespace(id=uuid4(), is_admin=is_admin, password=password)


def expired_issuer() -> TokenIssuer:
    return TokenIssuer(
        access_secret=ACCESS_SECRET,
        refresh_secret=REFRESH_SECRET,
        access_token_expiry=timedelta(seconds=-30),
        refresh_token_expiry=timedelta(seconds=-30),
    )


class TestTokenIssuerConstruction:
    def test_requires_both_secrets(self):
        with pytest.raises(ValueError):
            TokenIssuer(access_secret="", refresh_secret="refresh")
        with pytest.raises(ValueError):
            TokenIssuer(access_secret="access", refresh_secret="")

    def test_rejects_identical_secrets(self):
        with pytest.raises(ValueError, match="must differ"):
            TokenIssuer(access_secret="same", refresh_secret="same")


class TestAccessTokens:
    def test_claims(self, token_issuer):
        user = make_user(is_admin=True)
        token = token_issuer.issue_access_token(user.id, is_admin=True)

        claims = token_issuer.verify_access_token(token)
        assert claims["sub"] == str(user.id)
        assert claims["type"] == "access"
        assert claims["admin"] is True
        assert claims["iss"] == "ideaboard"
        assert claims["aud"] == "ideaboard-api"
        assert claims["exp"] - claims["iat"] == 20 * 60

    def test_expired_token_is_rejected(self):
        issuer = expired_issuer()
        token = issuer.issue_access_token(uuid4())
        with pytest.raises(InvalidToken):
            issuer.verify_access_token(token)

    def test_expiry_can_be_ignored(self):
        issuer = expired_issuer()
        user_id = uuid4()
        token = issuer.issue_access_token(user_id)
        claims = issuer.verify_access_token(token, verify_exp=False)
        assert claims["sub"] == str(user_id)

    def test_wrong_secret_is_rejected(self, token_issuer):
        other = TokenIssuer(access_secret="other-access", refresh_secret="other-refresh")
        token = other.issue_access_token(uuid4())
        with pytest.raises(InvalidToken):
            token_issuer.verify_access_token(token)

    def test_tampered_token_is_rejected(self, token_issuer):
        header, _, signature = token_issuer.issue_access_token(uuid4()).split(".")
        _, other_payload, _ = token_issuer.issue_access_token(uuid4()).split(".")
        tampered = f"{header}.{other_payload}.{signature}"
        with pytest.raises(InvalidToken):
            token_issuer.verify_access_token(tampered)

    def test_garbage_is_rejected(self, token_issuer):
        with pytest.raises(InvalidToken):
            token_issuer.verify_access_token("not-a-jwt")

    def test_refresh_token_is_not_an_access_token(self, token_issuer):
        user = make_user()
        refresh = token_issuer.issue_refresh_token(user.id, user.password)
        with pytest.raises(InvalidToken):
            token_issuer.verify_access_token(refresh)

    def test_access_token_with_refresh_type_is_rejected(self, token_issuer):
        forged = jwt.encode(
            {"sub": str(uuid4()), "type": "refresh", "iss": "ideaboard", "aud": "ideaboard-api"},
            ACCESS_SECRET,
            algorithm="HS256",
        )
        with pytest.raises(InvalidToken, match="access"):
            token_issuer.verify_access_token(forged)


class TestRefreshTokens:
    def test_bound_to_password_hash(self, token_issuer):
        user = make_user(password="hash-before")
        refresh = token_issuer.issue_refresh_token(user.id, user.password)

        assert token_issuer.verify_refresh_token(refresh, "hash-before")["sub"] == str(user.id)
        with pytest.raises(InvalidToken):
            token_issuer.verify_refresh_token(refresh, "hash-after")

    def test_create_tokens_returns_distinct_pair(self, token_issuer):
        pair = token_issuer.create_tokens(make_user())
        assert pair.access_token != pair.refresh_token

    def test_peek_subject(self, token_issuer):
        user = make_user()
        refresh = token_issuer.issue_refresh_token(user.id, user.password)
        assert token_issuer.peek_subject(refresh) == user.id

    @pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
    def test_peek_subject_rejects_malformed(self, token_issuer, token):
        with pytest.raises(InvalidToken):
            token_issuer.peek_subject(token)


class TestRefresh:
    @pytest.mark.asyncio
    async def test_rotates_pair_for_expired_access_token(self, token_issuer):
        user = make_user(is_admin=True)
        stale_access = expired_issuer().issue_access_token(user.id, is_admin=True)
        refresh = token_issuer.issue_refresh_token(user.id, user.password)

        async def load_user(user_id):
            return user if user_id == user.id else None

        pair = await token_issuer.refresh(stale_access, refresh, load_user)

        claims = token_issuer.verify_access_token(pair.access_token)
        assert claims["sub"] == str(user.id)
        assert claims["admin"] is True
        assert token_issuer.verify_refresh_token(pair.refresh_token, user.password)

    @pytest.mark.asyncio
    async def test_unknown_user(self, token_issuer):
        user = make_user()
        pair = token_issuer.create_tokens(user)

        async def load_user(user_id):
            return None

        with pytest.raises(InvalidToken):
            await token_issuer.refresh(pair.access_token, pair.refresh_token, load_user)

    @pytest.mark.asyncio
    async def test_password_change_invalidates_refresh_token(self, token_issuer):
        user = make_user(password="old-hash")
        pair = token_issuer.create_tokens(user)
        user.password = "new-hash"

        async def load_user(user_id):
            return user

        with pytest.raises(InvalidToken):
            await token_issuer.refresh(pair.access_token, pair.refresh_token, load_user)

    @pytest.mark.asyncio
    async def test_expired_refresh_token(self):
        issuer = expired_issuer()
        user = make_user()
        pair = issuer.create_tokens(user)

        async def load_user(user_id):
            return user

        with pytest.raises(InvalidToken):
            await issuer.refresh(pair.access_token, pair.refresh_token, load_user)

    @pytest.mark.asyncio
    async def test_subject_mismatch(self, token_issuer):
        alice = make_user()
        bob = make_user()
        alice_access = token_issuer.issue_access_token(alice.id)
        bob_refresh = token_issuer.issue_refresh_token(bob.id, bob.password)

        async def load_user(user_id):
            return {alice.id: alice, bob.id: bob}.get(user_id)

        with pytest.raises(InvalidToken, match="do not match"):
            await token_issuer.refresh(alice_access, bob_refresh, load_user)
