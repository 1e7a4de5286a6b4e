"""Tests for the shared resolver access checks."""

from unittest.mock import MagicMock

import pytest
import strawberry

from ideaboard.auth.context import ANONYMOUS
from ideaboard.auth.errors import AuthorizationError
from ideaboard.auth.sessions import SessionManager
from ideaboard.config import settings
from ideaboard.graphql.access_control import (
    get_auth_context_from_info,
    get_event_bus,
    get_session_manager,
    require_admin,
    require_authenticated,
)


def test_missing_auth_is_anonymous():
    info = MagicMock(spec=strawberry.Info)
    info.context = {}
    assert get_auth_context_from_info(info) is ANONYMOUS


def test_require_authenticated_rejects_anonymous(make_info):
    with pytest.raises(AuthorizationError, match="Authentication required"):
        require_authenticated(make_info())


def test_require_authenticated_returns_context(make_info, user_auth):
    assert require_authenticated(make_info(user_auth)) is user_auth


def test_require_admin(make_info, user_auth, admin_auth):
    with pytest.raises(AuthorizationError, match="Admin access required"):
        require_admin(make_info(user_auth))
    with pytest.raises(AuthorizationError, match="Authentication required"):
        require_admin(make_info())
    assert require_admin(make_info(admin_auth)) is admin_auth


def test_session_manager_uses_context_issuer(make_info, token_issuer):
    manager = get_session_manager(make_info(), MagicMock())
    assert isinstance(manager, SessionManager)
    assert manager.tokens is token_issuer


def test_session_manager_uses_configured_bcrypt_rounds(make_info, monkeypatch):
    monkeypatch.setattr(settings, "bcrypt_rounds", 6)
    assert get_session_manager(make_info(), MagicMock()).hasher.rounds == 6


def test_missing_collaborators_raise(make_info):
    info = make_info(tokens=None, events=None)
    with pytest.raises(RuntimeError):
        get_session_manager(info, MagicMock())
    with pytest.raises(RuntimeError):
        get_event_bus(info)
