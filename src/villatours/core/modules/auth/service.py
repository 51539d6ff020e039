import secrets
from datetime import datetime, timedelta
from typing import Any
from uuid import UUID

from pymongo.asynchronous.database import AsyncDatabase

from villatours.core.core import Service
from villatours.core.modules.admin.models import Admin
from villatours.core.modules.auth.models import ADMIN_SESSION_TTL, AdminSession, AuthToken
from villatours.errors import AuthenticationError
from villatours.utils import now


class AuthService(Service):
    """Issues and validates admin auth tokens."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("admin_sessions")
        self._authenticated_admins: dict[AuthToken, tuple[Admin, datetime]] = {}  # token -> (admin, session created_at)

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("auth_token", 1)], unique=True)
        await self._collection.create_index([("admin_id", 1)])
        await self._collection.create_index([("created_at", 1)], expireAfterSeconds=ADMIN_SESSION_TTL)

    async def create_session(self, admin_id: UUID) -> AuthToken:
        auth_token = AuthToken(secrets.token_urlsafe(32))
        await self._collection.insert_one(AdminSession(admin_id=admin_id, auth_token=auth_token).to_mongo())
        return auth_token

    async def get_authenticated_admin(self, auth_token: AuthToken) -> Admin:
        """Resolve a token to its admin; tokens older than ADMIN_SESSION_TTL are rejected even when cached."""
        cached = self._authenticated_admins.get(auth_token)
        if cached is None:
            session = AdminSession.from_mongo(await self._collection.find_one({"auth_token": auth_token}))
            if session is None or not self.core.services.admin.has_admin(session.admin_id):
                raise AuthenticationError("Invalid or expired session")
            cached = (self.core.services.admin.get_admin(session.admin_id), session.created_at)
            self._authenticated_admins[auth_token] = cached

        admin, created_at = cached
        # The TTL monitor deletes expired records only once a minute
        if now() - created_at >= timedelta(seconds=ADMIN_SESSION_TTL):
            self._authenticated_admins.pop(auth_token, None)
            raise AuthenticationError("Invalid or expired session")
        return admin

    async def is_auth_token_valid(self, auth_token: AuthToken) -> bool:
        try:
            await self.get_authenticated_admin(auth_token)
        except AuthenticationError:
            return False
        return True

    async def invalidate_session(self, auth_token: AuthToken) -> None:
        self._authenticated_admins.pop(auth_token, None)
        await self._collection.delete_one({"auth_token": auth_token})
