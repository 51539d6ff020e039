from typing import Any
from uuid import UUID

import bcrypt
import structlog
from pymongo.asynchronous.database import AsyncDatabase

from villatours.core.core import Service
from villatours.core.modules.admin.models import Admin
from villatours.errors import NotFoundError, ValidationError

logger = structlog.get_logger(__name__)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


class AdminService(Service):
    """Manages administrator accounts with in-memory cache."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("admins")
        self._admins: dict[UUID, Admin] = {}

    def get_admin(self, admin_id: UUID) -> Admin:
        """Get admin by ID from cache."""
        if admin_id not in self._admins:
            raise NotFoundError(f"Admin '{admin_id}' not found")
        return self._admins[admin_id]

    def get_admin_by_username(self, username: str) -> Admin:
        admin = next((a for a in self._admins.values() if a.username == username), None)
        if admin is None:
            raise NotFoundError(f"Admin '{username}' not found")
        return admin

    def has_admin(self, admin_id: UUID) -> bool:
        return admin_id in self._admins

    def has_username(self, username: str) -> bool:
        return any(admin.username == username for admin in self._admins.values())

    async def create_admin(self, username: str, password: str) -> Admin:
        """Create admin with hashed password."""
        if self.has_username(username):
            raise ValidationError(f"Admin '{username}' already exists")
        if len(password) < 2 or any(char.isspace() for char in password):
            raise ValidationError("Password must be at least 2 characters long and contain no whitespace")

        admin = Admin(username=username, password_hash=hash_password(password))
        await self._collection.insert_one(admin.to_mongo())
        self._admins[admin.id] = admin
        return admin

    def verify_password(self, username: str, password: str) -> bool:
        """Verify password against stored hash."""
        admin = next((a for a in self._admins.values() if a.username == username), None)
        if admin is None:
            return False
        return bcrypt.checkpw(password.encode("utf-8"), admin.password_hash.encode("utf-8"))

    async def ensure_bootstrap_admin_exists(self) -> None:
        """Create the configured admin account if missing."""
        config = self.core.config
        if not self.has_username(config.admin_username):
            await self.create_admin(config.admin_username, config.admin_password)
            logger.info("bootstrap_admin_created", username=config.admin_username)

    async def on_start(self) -> None:
        """Initialize indexes, cache, and bootstrap admin."""
        await self._collection.create_index([("username", 1)], unique=True)
        admins = await Admin.list_cursor(self._collection.find())
        self._admins = {admin.id: admin for admin in admins}
        await self.ensure_bootstrap_admin_exists()
        logger.debug("admin_service_started", admin_count=len(self._admins))
