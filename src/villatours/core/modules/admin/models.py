from uuid import UUID

from pydantic import BaseModel, Field

from villatours.core.db import MongoModel


class Admin(MongoModel):
    """Administrator account with credentials."""

    username: str
    password_hash: str  # bcrypt hash


class AdminView(BaseModel):
    """Administrator account information (API representation)."""

    id: UUID = Field(..., description="Admin ID")
    username: str = Field(..., description="Username")

    @classmethod
    def from_domain(cls, admin: Admin) -> "AdminView":
        return cls(id=admin.id, username=admin.username)
