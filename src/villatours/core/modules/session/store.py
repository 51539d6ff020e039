from typing import Protocol

from villatours.core.modules.session.models import Session, SessionId


class SessionStore(Protocol):
    """Authoritative storage for payment sessions.

    Implementations raise SessionUnavailableError when the backend cannot be reached.
    Results are never cached across requests.
    """

    async def get(self, session_id: SessionId) -> Session | None:
        """Return the live session with this id, or None if unknown or expired."""
        ...

    async def create(self) -> Session:
        """Allocate and persist a new session."""
        ...

    async def save(self, session: Session) -> None:
        """Persist all fields of an existing session."""
        ...

    async def set_csrf_token_if_absent(self, session_id: SessionId, token: str) -> str | None:
        """Store `token` unless the session already has one.

        Returns the token now held by the session, or None if the session no longer exists.
        """
        ...

    async def destroy(self, session_id: SessionId) -> None:
        """Delete the session record."""
        ...
