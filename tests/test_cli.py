"""Tests for the ideaboard command line."""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

from click.testing import CliRunner

from ideaboard.cli import cli
from ideaboard.config import settings
from ideaboard.dbmodels import Users


@asynccontextmanager
async def fake_session():
    yield MagicMock()


def test_provision_user(monkeypatch):
    monkeypatch.setattr(settings, "jwt_secret", "access")
    monkeypatch.setattr(settings, "jwt_refresh_secret", "refresh")
    account = Users(id=uuid4(), username="bob", email="bob@example.com", password=None)

    with (
        patch("ideaboard.database.connection.get_async_session", fake_session),
        patch(
            "ideaboard.auth.sessions.SessionManager.provision_user",
            AsyncMock(return_value=account),
        ) as provision,
    ):
        result = CliRunner().invoke(
            cli, ["user", "provision", "--username", "bob", "--email", "bob@example.com"]
        )

    assert result.exit_code == 0, result.output
    provision.assert_awaited_once_with("bob", "bob@example.com")
    assert str(account.id) in result.output


def test_provision_user_without_secrets_fails(monkeypatch):
    monkeypatch.setattr(settings, "jwt_secret", None)

    with patch("ideaboard.database.connection.get_async_session", fake_session):
        result = CliRunner().invoke(
            cli, ["user", "provision", "--username", "bob", "--email", "bob@example.com"]
        )

    assert result.exit_code == 1


def test_list_users():
    result = MagicMock()
    result.scalars.return_value.all.return_value = [
        Users(id=uuid4(), username="alice", email="a@example.com", password="h", is_admin=True),
        Users(id=uuid4(), username="bob", email="b@example.com", password=None, is_admin=False),
    ]
    db = MagicMock()
    db.execute = AsyncMock(return_value=result)

    @asynccontextmanager
    async def session():
        yield db

    with patch("ideaboard.database.connection.get_async_session", session):
        outcome = CliRunner().invoke(cli, ["user", "list"])

    assert outcome.exit_code == 0, outcome.output
    rows = {line.split()[1]: line.split()[-2:] for line in outcome.output.splitlines()[1:]}
    assert rows["alice"] == ["yes", "yes"]
    assert rows["bob"] == ["no", "no"]


def test_serve_uses_configured_api_settings(monkeypatch):
    monkeypatch.setattr(settings, "api_host", "127.0.0.1")
    monkeypatch.setattr(settings, "api_port", 8123)
    monkeypatch.setattr(settings, "api_reload", True)

    with patch("ideaboard.cli.uvicorn.run") as run:
        result = CliRunner().invoke(cli, ["serve", "--workers", "4"])

    assert result.exit_code == 0, result.output
    kwargs = run.call_args.kwargs
    assert (kwargs["host"], kwargs["port"], kwargs["reload"]) == ("127.0.0.1", 8123, True)
    assert kwargs["workers"] == 1


def test_serve_options_override_settings(monkeypatch):
    monkeypatch.setattr(settings, "api_reload", True)

    with patch("ideaboard.cli.uvicorn.run") as run:
        result = CliRunner().invoke(
            cli, ["serve", "--host", "localhost", "--port", "9000", "--no-reload"]
        )

    assert result.exit_code == 0, result.output
    kwargs = run.call_args.kwargs
    assert (kwargs["host"], kwargs["port"], kwargs["reload"]) == ("localhost", 9000, False)
