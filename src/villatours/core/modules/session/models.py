"""Server-side payment session models."""

import secrets
from datetime import datetime, timedelta
from typing import NewType
from uuid import UUID

from pydantic import BaseModel, Field

from villatours.core.db import MongoModel
from villatours.utils import now

SessionId = NewType("SessionId", str)


def new_session_id() -> SessionId:
    return SessionId(secrets.token_urlsafe(32))


class Session(MongoModel):
    """Payment session record, referenced by the signed `session` cookie.

    Indexed on expires_at (TTL, expireAfterSeconds=0).
    """

    # Opaque random string rather than the UUID other documents use
    id: SessionId = Field(alias="_id", serialization_alias="id", default_factory=new_session_id)  # type: ignore[assignment]
    csrf_token: str | None = None  # Minted lazily by the CSRF gate, never rotated
    order_id: UUID | None = None  # Order currently being paid for
    created_at: datetime = Field(default_factory=now)
    expires_at: datetime

    @classmethod
    def start(cls, ttl: int) -> "Session":
        """Create a new session expiring `ttl` seconds from now."""
        created_at = now()
        return cls(created_at=created_at, expires_at=created_at + timedelta(seconds=ttl))

    @property
    def is_expired(self) -> bool:
        return self.expires_at <= now()


class CsrfTokenView(BaseModel):
    """CSRF token for the current payment session."""

    csrf_token: str = Field(..., description="Token to send back in the X-CSRF-Token header")
