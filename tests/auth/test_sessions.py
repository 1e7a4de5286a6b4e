"""Unit tests for the session lifecycle against an in-memory credential store."""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from ideaboard.auth.errors import InvalidCredentials, InvalidToken, StoreError
from ideaboard.auth.passwords import dummy_hash, verify_password
from ideaboard.auth.sessions import SessionManager
from ideaboard.config import settings


class TestLogin:
    @pytest.mark.asyncio
    async def test_success_returns_token_pair(self, sessions, token_issuer):
        user = await sessions.register("alice", "alice@example.com", "wonderland")

        pair = await sessions.login("alice@example.com", "wonderland")

        assert pair.access_token != pair.refresh_token
        claims = token_issuer.verify_access_token(pair.access_token)
        assert claims["sub"] == str(user.id)
        assert token_issuer.verify_refresh_token(pair.refresh_token, user.password)

    @pytest.mark.asyncio
    async def test_wrong_password(self, sessions):
        await sessions.register("alice", "alice@example.com", "wonderland")
        with pytest.raises(InvalidCredentials, match="Invalid login"):
            await sessions.login("alice@example.com", "looking-glass")

    @pytest.mark.asyncio
    async def test_unknown_email(self, sessions):
        with pytest.raises(InvalidCredentials):
            await sessions.login("nobody@example.com", "whatever")

    @pytest.mark.asyncio
    async def test_unclaimed_account_cannot_log_in(self, sessions):
        await sessions.provision_user("placeholder", "bob@example.com")
        with pytest.raises(InvalidCredentials):
            await sessions.login("bob@example.com", "")

    @pytest.mark.asyncio
    async def test_unknown_email_costs_one_bcrypt_check(self, sessions):
        sessions.hasher.verify = AsyncMock(wraps=sessions.hasher.verify)

        with pytest.raises(InvalidCredentials):
            await sessions.login("nobody@example.com", "whatever")

        sessions.hasher.verify.assert_awaited_once_with(
            "whatever", dummy_hash(sessions.hasher.rounds)
        )

    @pytest.mark.asyncio
    async def test_unclaimed_account_costs_one_bcrypt_check(self, sessions):
        await sessions.provision_user("placeholder", "bob@example.com")
        sessions.hasher.verify = AsyncMock(wraps=sessions.hasher.verify)

        with pytest.raises(InvalidCredentials):
            await sessions.login("bob@example.com", "guess")

        sessions.hasher.verify.assert_awaited_once_with("guess", dummy_hash(sessions.hasher.rounds))


class TestHasherConfiguration:
    def test_default_hasher_uses_configured_rounds(self, monkeypatch, store, token_issuer):
        monkeypatch.setattr(settings, "bcrypt_rounds", 5)

        assert SessionManager(store, token_issuer).hasher.rounds == 5

    def test_explicit_hasher_wins(self, store, token_issuer, fast_hasher):
        assert SessionManager(store, token_issuer, fast_hasher).hasher is fast_hasher


class TestRegister:
    @pytest.mark.asyncio
    async def test_creates_new_account(self, sessions, store):
        user = await sessions.register("alice", "alice@example.com", "wonderland")

        assert user.username == "alice"
        assert user.is_claimed
        assert user.password != "wonderland"
        assert verify_password("wonderland", user.password)
        assert store.count() == 1

    @pytest.mark.asyncio
    async def test_claims_provisioned_account(self, sessions, store):
        provisioned = await sessions.provision_user("placeholder", "bob@example.com")
        assert not provisioned.is_claimed

        user = await sessions.register("bob", "bob@example.com", "builder")

        assert user.id == provisioned.id
        assert user.username == "bob"
        assert user.is_claimed
        assert store.count(email="bob@example.com") == 1
        await sessions.login("bob@example.com", "builder")

    @pytest.mark.asyncio
    async def test_claimed_email_is_not_overwritten(self, sessions, store):
        original = await sessions.register("alice", "alice@example.com", "wonderland")

        with pytest.raises(StoreError):
            await sessions.register("mallory", "alice@example.com", "stolen")

        assert store.count(email="alice@example.com") == 1
        assert original.username == "alice"
        assert verify_password("wonderland", original.password)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "username,email,password",
        [("", "a@example.com", "pw"), ("a", "", "pw"), ("a", "a@example.com", "")],
    )
    async def test_requires_all_fields(self, sessions, username, email, password):
        with pytest.raises(ValueError):
            await sessions.register(username, email, password)


class TestRefreshTokens:
    @pytest.mark.asyncio
    async def test_rotates_pair(self, sessions, token_issuer):
        user = await sessions.register("alice", "alice@example.com", "wonderland")
        pair = await sessions.login("alice@example.com", "wonderland")

        rotated = await sessions.refresh_tokens(pair.access_token, pair.refresh_token)

        assert token_issuer.verify_access_token(rotated.access_token)["sub"] == str(user.id)

    @pytest.mark.asyncio
    async def test_tampered_refresh_token(self, sessions):
        await sessions.register("alice", "alice@example.com", "wonderland")
        pair = await sessions.login("alice@example.com", "wonderland")
        header, payload, _ = pair.refresh_token.split(".")
        _, _, foreign_signature = pair.access_token.split(".")

        with pytest.raises(InvalidToken):
            await sessions.refresh_tokens(
                pair.access_token, f"{header}.{payload}.{foreign_signature}"
            )

    @pytest.mark.asyncio
    async def test_password_reset_invalidates_refresh_token(self, sessions):
        user = await sessions.register("alice", "alice@example.com", "wonderland")
        pair = await sessions.login("alice@example.com", "wonderland")

        assert await sessions.reset_password(user.id, "new-secret")

        with pytest.raises(InvalidToken):
            await sessions.refresh_tokens(pair.access_token, pair.refresh_token)


class TestResetPassword:
    @pytest.mark.asyncio
    async def test_success(self, sessions):
        user = await sessions.register("alice", "alice@example.com", "wonderland")
        old_hash = user.password

        assert await sessions.reset_password(user.id, "new-secret") is True
        assert user.password != old_hash

        await sessions.login("alice@example.com", "new-secret")
        with pytest.raises(InvalidCredentials):
            await sessions.login("alice@example.com", "wonderland")

    @pytest.mark.asyncio
    async def test_unknown_user(self, sessions):
        assert await sessions.reset_password(uuid4(), "new-secret") is False

    @pytest.mark.asyncio
    async def test_unclaimed_account(self, sessions):
        provisioned = await sessions.provision_user("placeholder", "bob@example.com")
        assert await sessions.reset_password(provisioned.id, "new-secret") is False
        assert provisioned.password is None

    @pytest.mark.asyncio
    async def test_empty_password(self, sessions):
        user = await sessions.register("alice", "alice@example.com", "wonderland")
        assert await sessions.reset_password(user.id, "") is False

    @pytest.mark.asyncio
    async def test_store_failure_returns_false(self, sessions, store):
        user = await sessions.register("alice", "alice@example.com", "wonderland")
        store.fail_writes = True

        assert await sessions.reset_password(user.id, "new-secret") is False

    @pytest.mark.asyncio
    async def test_lookup_failure_returns_false(self, sessions, store):
        store.fail_reads = True
        assert await sessions.reset_password(uuid4(), "new-secret") is False


class TestAdministrativeAccounts:
    @pytest.mark.asyncio
    async def test_create_user_gets_unusable_hashed_password(self, sessions):
        user = await sessions.create_user("carol", "carol@example.com", is_admin=True)

        assert user.is_admin is True
        assert user.is_claimed
        assert user.password.startswith("$2b$")
        with pytest.raises(InvalidCredentials):
            await sessions.login("carol@example.com", "idk")

    @pytest.mark.asyncio
    async def test_provision_user_is_unclaimed(self, sessions, store):
        user = await sessions.provision_user("dave", "dave@example.com")

        assert user.password is None
        assert not user.is_claimed
        assert store.count(password=None) == 1
