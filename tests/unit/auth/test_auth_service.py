"""Tests for admin login sessions."""

from datetime import timedelta

import pytest

from villatours.core.modules.auth.models import ADMIN_SESSION_TTL, AuthToken
from villatours.errors import AuthenticationError
from villatours.utils import now


@pytest.fixture
def admin_sessions(database):
    return database.get_collection("admin_sessions")


class TestLogin:
    @pytest.mark.asyncio
    async def test_bootstrap_admin_can_log_in(self, app, config):
        token = await app.login(config.admin_username, config.admin_password)

        admin = await app.get_current_admin(token)
        assert admin.username == config.admin_username

    @pytest.mark.asyncio
    async def test_wrong_password_rejected(self, app, config):
        with pytest.raises(AuthenticationError, match="Invalid credentials"):
            await app.login(config.admin_username, "wrong")

    @pytest.mark.asyncio
    async def test_unknown_username_rejected(self, app):
        with pytest.raises(AuthenticationError):
            await app.login("nobody", "secret")

    @pytest.mark.asyncio
    async def test_password_is_stored_hashed(self, app, database, config):
        (doc,) = database.get_collection("admins").docs

        assert doc["password_hash"] != config.admin_password
        assert doc["password_hash"].startswith("$2")


class TestTokenValidation:
    @pytest.mark.asyncio
    async def test_unknown_token_invalid(self, app):
        assert await app.is_auth_token_valid(AuthToken("nope")) is False

    @pytest.mark.asyncio
    async def test_logout_invalidates_token(self, app, config):
        token = await app.login(config.admin_username, config.admin_password)
        assert await app.is_auth_token_valid(token) is True

        await app.logout(token)

        assert await app.is_auth_token_valid(token) is False

    @pytest.mark.asyncio
    async def test_expired_record_rejected(self, app, config, admin_sessions):
        token = await app.login(config.admin_username, config.admin_password)
        admin_sessions.docs[0]["created_at"] = now() - timedelta(seconds=ADMIN_SESSION_TTL + 1)

        with pytest.raises(AuthenticationError):
            await app.get_current_admin(token)

    @pytest.mark.asyncio
    async def test_cached_token_expires_after_ttl(self, app, config, monkeypatch):
        token = await app.login(config.admin_username, config.admin_password)
        await app.get_current_admin(token)
        later = now() + timedelta(seconds=ADMIN_SESSION_TTL)
        monkeypatch.setattr("villatours.core.modules.auth.service.now", lambda: later)

        assert await app.is_auth_token_valid(token) is False

    @pytest.mark.asyncio
    async def test_cached_token_valid_before_ttl(self, app, config, monkeypatch):
        token = await app.login(config.admin_username, config.admin_password)
        await app.get_current_admin(token)
        later = now() + timedelta(seconds=ADMIN_SESSION_TTL - 60)
        monkeypatch.setattr("villatours.core.modules.auth.service.now", lambda: later)

        assert await app.is_auth_token_valid(token) is True
