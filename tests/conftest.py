"""Shared pytest fixtures."""

import asyncio
from copy import deepcopy
from types import SimpleNamespace
from typing import Any

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError

from villatours.app import App
from villatours.config import Config
from villatours.core.modules.csrf.gate import CsrfGate
from villatours.core.modules.session.cookies import SessionCookieSigner
from villatours.core.modules.session.models import Session, SessionId
from villatours.errors import SessionUnavailableError
from villatours.web.server import create_fastapi_app

SESSION_TTL = 3600
MERCHANT_ID = "1211149"
MERCHANT_SECRET = "merchant-secret"
ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "admin-pass"


def _matches(doc: dict[str, Any], query: dict[str, Any]) -> bool:
    for key, condition in query.items():
        value = doc.get(key)
        if isinstance(condition, dict) and condition and all(op.startswith("$") for op in condition):
            for op, operand in condition.items():
                if op != "$gt":
                    raise NotImplementedError(op)
                if value is None or not value > operand:
                    return False
        elif value != condition:  # None also matches a missing field, as in MongoDB
            return False
    return True


class InMemoryCursor:
    def __init__(self, docs: list[dict[str, Any]]) -> None:
        self._docs = docs

    def sort(self, key: str | list[tuple[str, int]], direction: int = 1) -> "InMemoryCursor":
        keys = [(key, direction)] if isinstance(key, str) else key
        for field, order in reversed(keys):
            self._docs.sort(key=lambda doc, f=field: doc.get(f), reverse=order < 0)
        return self

    def skip(self, count: int) -> "InMemoryCursor":
        self._docs = self._docs[count:]
        return self

    def limit(self, count: int) -> "InMemoryCursor":
        if count:
            self._docs = self._docs[:count]
        return self

    async def _iterate(self):
        for doc in self._docs:
            yield doc

    def __aiter__(self):
        return self._iterate()


class InMemoryCollection:
    """The subset of AsyncCollection the services use.

    Set `fail` to make every call raise like an unreachable server.
    """

    def __init__(self) -> None:
        self.docs: list[dict[str, Any]] = []
        self.fail = False

    def _check(self) -> None:
        if self.fail:
            raise ServerSelectionTimeoutError("in-memory collection is down")

    def _first(self, query: dict[str, Any]) -> dict[str, Any] | None:
        return next((doc for doc in self.docs if _matches(doc, query)), None)

    async def create_index(self, *args: Any, **kwargs: Any) -> str:
        return "index"

    async def find_one(self, query: dict[str, Any] | None = None) -> dict[str, Any] | None:
        self._check()
        doc = self._first(query or {})
        return deepcopy(doc) if doc is not None else None

    def find(self, query: dict[str, Any] | None = None) -> InMemoryCursor:
        self._check()
        return InMemoryCursor([deepcopy(doc) for doc in self.docs if _matches(doc, query or {})])

    async def count_documents(self, query: dict[str, Any], limit: int = 0) -> int:
        self._check()
        count = sum(1 for doc in self.docs if _matches(doc, query))
        return min(count, limit) if limit else count

    async def insert_one(self, doc: dict[str, Any]) -> SimpleNamespace:
        self._check()
        self.docs.append(deepcopy(doc))
        return SimpleNamespace(inserted_id=doc.get("_id"))

    async def replace_one(self, query: dict[str, Any], replacement: dict[str, Any]) -> SimpleNamespace:
        self._check()
        for index, doc in enumerate(self.docs):
            if _matches(doc, query):
                self.docs[index] = deepcopy(replacement)
                return SimpleNamespace(matched_count=1)
        return SimpleNamespace(matched_count=0)

    async def find_one_and_update(
        self, query: dict[str, Any], update: dict[str, Any], upsert: bool = False, **kwargs: Any
    ) -> dict[str, Any] | None:
        """Apply $set / $inc and return the document after the update."""
        self._check()
        doc = self._first(query)
        if doc is None:
            if not upsert:
                return None
            doc = {key: value for key, value in query.items() if not isinstance(value, dict)}
            self.docs.append(doc)
        for key, value in update.get("$set", {}).items():
            doc[key] = deepcopy(value)
        for key, value in update.get("$inc", {}).items():
            doc[key] = doc.get(key, 0) + value
        return deepcopy(doc)

    async def delete_one(self, query: dict[str, Any]) -> SimpleNamespace:
        self._check()
        doc = self._first(query)
        if doc is None:
            return SimpleNamespace(deleted_count=0)
        self.docs.remove(doc)
        return SimpleNamespace(deleted_count=1)

    async def delete_many(self, query: dict[str, Any]) -> SimpleNamespace:
        self._check()
        kept = [doc for doc in self.docs if not _matches(doc, query)]
        deleted = len(self.docs) - len(kept)
        self.docs = kept
        return SimpleNamespace(deleted_count=deleted)


class InMemoryDatabase:
    def __init__(self) -> None:
        self.collections: dict[str, InMemoryCollection] = {}

    def get_collection(self, name: str) -> InMemoryCollection:
        return self.collections.setdefault(name, InMemoryCollection())


class InMemorySessionStore:
    """Session store keeping copies of sessions in a dict.

    `available`, `fail_destroy` and `delay` simulate an unhealthy backend.
    """

    def __init__(self) -> None:
        self.sessions: dict[SessionId, Session] = {}
        self.available = True
        self.fail_destroy = False
        self.delay = 0.0

    async def _roundtrip(self) -> None:
        if self.delay:
            await asyncio.sleep(self.delay)
        if not self.available:
            raise SessionUnavailableError

    async def get(self, session_id: SessionId) -> Session | None:
        await self._roundtrip()
        session = self.sessions.get(session_id)
        if session is None or session.is_expired:
            return None
        return session.model_copy()

    async def create(self) -> Session:
        await self._roundtrip()
        session = Session.start(SESSION_TTL)
        self.sessions[session.id] = session.model_copy()
        return session

    async def save(self, session: Session) -> None:
        await self._roundtrip()
        self.sessions[session.id] = session.model_copy()

    async def set_csrf_token_if_absent(self, session_id: SessionId, token: str) -> str | None:
        await self._roundtrip()
        session = self.sessions.get(session_id)
        if session is None:
            return None
        if not session.csrf_token:
            session.csrf_token = token
        return session.csrf_token

    async def destroy(self, session_id: SessionId) -> None:
        await self._roundtrip()
        if self.fail_destroy:
            raise SessionUnavailableError
        self.sessions.pop(session_id, None)


@pytest.fixture
def store():
    """Empty in-memory session store."""
    return InMemorySessionStore()


@pytest.fixture
def signer():
    return SessionCookieSigner("test-secret", SESSION_TTL)


@pytest.fixture
def gate(store, signer):
    """Gate over the in-memory store with a short store timeout."""
    return CsrfGate(store=store, signer=signer, store_timeout=0.2)


@pytest.fixture
def config():
    return Config(
        _env_file=None,
        database_url="mongodb://localhost:27017/villatours_test",
        session_secret_key="test-secret",
        session_ttl=SESSION_TTL,
        session_store_timeout=1.0,
        admin_username=ADMIN_USERNAME,
        admin_password=ADMIN_PASSWORD,
        payhere_merchant_id=MERCHANT_ID,
        payhere_merchant_secret=MERCHANT_SECRET,
    )


@pytest.fixture
def database():
    """Empty in-memory stand-in for the MongoDB database."""
    return InMemoryDatabase()


@pytest_asyncio.fixture
async def app(config, database):
    """App wired to the in-memory database with all services started."""
    app = App(config)
    app._core.use_database(database)
    await app._core.services.start_all()
    return app


@pytest.fixture
def core(app):
    return app._core


@pytest.fixture
def api_client(config, database):
    """TestClient over the full FastAPI app; the lifespan starts the services."""
    app = App(config)
    app._core.use_database(database)
    with TestClient(create_fastapi_app(app, config), raise_server_exceptions=False) as client:
        yield client
