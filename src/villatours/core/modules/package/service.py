from typing import Any
from uuid import UUID

import structlog
from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase

from villatours.core.core import Service
from villatours.core.modules.package.models import Package, PackageData, PackageUpdate
from villatours.core.pagination import PaginationResult, paginate
from villatours.errors import NotFoundError
from villatours.utils import now

logger = structlog.get_logger(__name__)


class PackageService(Service):
    """Manages travel packages."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("packages")

    async def on_start(self) -> None:
        await self._collection.create_index([("trending", 1)])
        await self._collection.create_index([("created_at", -1)])

    async def list_packages(self, limit: int = 50, offset: int = 0, trending: bool | None = None) -> PaginationResult[Package]:
        query: dict[str, Any] = {}
        if trending is not None:
            query["trending"] = trending
        return await paginate(self._collection, Package, query, limit, offset, [("created_at", -1)])

    async def get_package(self, package_id: UUID) -> Package:
        package = Package.from_mongo(await self._collection.find_one({"_id": package_id}))
        if package is None:
            raise NotFoundError(f"Package '{package_id}' not found")
        return package

    async def has_package(self, package_id: UUID) -> bool:
        return await self._collection.count_documents({"_id": package_id}, limit=1) > 0

    async def create_package(self, data: PackageData) -> Package:
        package = Package(**data.model_dump())
        await self._collection.insert_one(package.to_mongo())
        logger.debug("package_created", package_id=package.id)
        return package

    async def update_package(self, package_id: UUID, update: PackageUpdate) -> Package:
        """Apply a partial update and return the stored package."""
        changes = update.model_dump(exclude_unset=True, exclude_none=True)
        changes["updated_at"] = now()
        doc = await self._collection.find_one_and_update(
            {"_id": package_id}, {"$set": changes}, return_document=ReturnDocument.AFTER
        )
        package = Package.from_mongo(doc)
        if package is None:
            raise NotFoundError(f"Package '{package_id}' not found")
        return package

    async def set_trending(self, package_id: UUID, trending: bool) -> Package:
        return await self.update_package(package_id, PackageUpdate(trending=trending))

    async def delete_package(self, package_id: UUID) -> None:
        result = await self._collection.delete_one({"_id": package_id})
        if result.deleted_count == 0:
            raise NotFoundError(f"Package '{package_id}' not found")
