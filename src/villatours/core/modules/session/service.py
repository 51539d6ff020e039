from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog
from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError

from villatours.core.core import Service
from villatours.core.modules.session.models import Session, SessionId
from villatours.errors import NotFoundError, SessionUnavailableError
from villatours.utils import now, short_id

logger = structlog.get_logger(__name__)


@contextmanager
def _store_errors() -> Iterator[None]:
    try:
        yield
    except PyMongoError as exc:
        logger.exception("session_store_error")
        raise SessionUnavailableError from exc


class SessionService(Service):
    """MongoDB-backed payment session store."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("payment_sessions")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        # Records are removed by MongoDB once expires_at has passed
        await self._collection.create_index([("expires_at", 1)], expireAfterSeconds=0)

    async def get(self, session_id: SessionId) -> Session | None:
        with _store_errors():
            doc = await self._collection.find_one({"_id": session_id, "expires_at": {"$gt": now()}})
        return Session.from_mongo(doc)

    async def create(self) -> Session:
        session = Session.start(self.core.config.session_ttl)
        with _store_errors():
            await self._collection.insert_one(session.to_mongo())
        logger.debug("session_created", session=short_id(session.id))
        return session

    async def save(self, session: Session) -> None:
        with _store_errors():
            res = await self._collection.replace_one({"_id": session.id}, session.to_mongo())
        if res.matched_count == 0:
            raise NotFoundError("Session not found")

    async def set_csrf_token_if_absent(self, session_id: SessionId, token: str) -> str | None:
        with _store_errors():
            doc = await self._collection.find_one_and_update(
                {"_id": session_id, "csrf_token": None},
                {"$set": {"csrf_token": token}},
                return_document=ReturnDocument.AFTER,
            )
            if doc is None:
                # Either another request stored a token first or the session is gone
                doc = await self._collection.find_one({"_id": session_id})
        if doc is None or not doc.get("csrf_token"):
            return None
        return str(doc["csrf_token"])

    async def destroy(self, session_id: SessionId) -> None:
        with _store_errors():
            await self._collection.delete_one({"_id": session_id})
        logger.debug("session_destroyed", session=short_id(session_id))
