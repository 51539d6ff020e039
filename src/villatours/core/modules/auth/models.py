"""Admin authentication models."""

from datetime import datetime
from typing import NewType
from uuid import UUID

from pydantic import Field

from villatours.core.db import MongoModel
from villatours.utils import now

AuthToken = NewType("AuthToken", str)

ADMIN_SESSION_TTL = 30 * 24 * 60 * 60  # Seconds, also the auth_token cookie max age


class AdminSession(MongoModel):
    """Admin login session.

    Indexed on auth_token - unique, admin_id, created_at (TTL 30 days).
    """

    admin_id: UUID
    auth_token: str
    created_at: datetime = Field(default_factory=now)
