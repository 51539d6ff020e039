from __future__ import annotations

import importlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any, cast
from urllib.parse import urlparse

import structlog
from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from villatours.config import Config
from villatours.core.modules.csrf.gate import CsrfGate
from villatours.core.modules.session.cookies import SessionCookieSigner

logger = structlog.get_logger(__name__)

# Startup order: admin bootstraps before auth, session before anything payment related
SERVICE_NAMES = ("admin", "auth", "session", "counter", "package", "inclusion", "gallery", "order")


class Service:
    """Base class for services with direct database access."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self.database = database
        self._core: Core | None = None

    async def on_start(self) -> None:
        """Initialize service on application startup."""

    async def on_stop(self) -> None:
        """Cleanup service on application shutdown."""

    @property
    def core(self) -> Core:
        """Get the core application context."""
        if self._core is None:
            raise RuntimeError("Core not set for service")
        return self._core

    def set_core(self, core: Core) -> None:
        """Set the core application context."""
        self._core = core


class Services:
    """Service registry that automatically discovers and initializes services."""

    from villatours.core.modules.admin.service import AdminService  # noqa: PLC0415
    from villatours.core.modules.auth.service import AuthService  # noqa: PLC0415
    from villatours.core.modules.counter.service import CounterService  # noqa: PLC0415
    from villatours.core.modules.gallery.service import GalleryService  # noqa: PLC0415
    from villatours.core.modules.inclusion.service import InclusionService  # noqa: PLC0415
    from villatours.core.modules.order.service import OrderService  # noqa: PLC0415
    from villatours.core.modules.package.service import PackageService  # noqa: PLC0415
    from villatours.core.modules.session.service import SessionService  # noqa: PLC0415

    admin: AdminService
    auth: AuthService
    session: SessionService
    counter: CounterService
    package: PackageService
    inclusion: InclusionService
    gallery: GalleryService
    order: OrderService

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        """Instantiate every service listed in SERVICE_NAMES, in that order."""
        self._services: list[Service] = []
        for name in SERVICE_NAMES:
            # villatours.core.modules.<name>.service defines <Name>Service
            module = importlib.import_module(f"villatours.core.modules.{name}.service")
            service = cast(type[Service], getattr(module, f"{name.capitalize()}Service"))(database)
            setattr(self, name, service)
            self._services.append(service)

    def set_core(self, core: Core) -> None:
        """Set core reference for all services."""
        for service in self._services:
            service.set_core(core)

    async def start_all(self) -> None:
        for service in self._services:
            await service.on_start()

    async def stop_all(self) -> None:
        for service in self._services:
            await service.on_stop()


def database_name(database_url: str) -> str:
    """Database name from the path of a mongodb:// URL."""
    name = urlparse(database_url).path.lstrip("/")
    if not name:
        raise ValueError("database_url must name a database, e.g. mongodb://localhost:27017/villatours")
    return name


class Core:
    """Container providing config, database, all service instances and the payment gate."""

    config: Config
    mongo_client: AsyncMongoClient[dict[str, Any]]
    database: AsyncDatabase[dict[str, Any]]
    services: Services
    csrf_gate: CsrfGate

    def __init__(self, config: Config) -> None:
        """Initialize core with config, MongoDB, and auto-register services."""
        self.config = config
        self.mongo_client = AsyncMongoClient(
            config.database_url,
            uuidRepresentation="standard",
            tz_aware=True,
            serverSelectionTimeoutMS=int(config.session_store_timeout * 1000),
        )
        self.use_database(self.mongo_client.get_database(database_name(config.database_url)))

    def use_database(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        """Bind all services and the payment gate to `database`."""
        self.database = database
        self.services = Services(database)
        self.services.set_core(self)
        self.csrf_gate = CsrfGate(
            store=self.services.session,
            signer=SessionCookieSigner(self.config.session_secret_key, self.config.session_ttl),
            store_timeout=self.config.session_store_timeout,
        )

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Manage application lifecycle - startup and shutdown."""
        await self.on_start()
        try:
            yield
        finally:
            await self.on_stop()

    async def on_start(self) -> None:
        await self.services.start_all()
        logger.info("core_started", environment=self.config.environment)

    async def on_stop(self) -> None:
        """Stop services and close MongoDB connection on shutdown."""
        await self.services.stop_all()
        await self.mongo_client.aclose()
        logger.info("core_stopped")

