from typing import Any
from uuid import UUID

from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase

from villatours.core.core import Service
from villatours.core.modules.inclusion.models import Inclusion
from villatours.errors import NotFoundError


class InclusionService(Service):
    """Manages package inclusions."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("inclusions")

    async def on_start(self) -> None:
        await self._collection.create_index([("package_id", 1)])

    async def list_inclusions(self, package_id: UUID | None = None) -> list[Inclusion]:
        query = {} if package_id is None else {"package_id": package_id}
        return await Inclusion.list_cursor(self._collection.find(query).sort("title", 1))

    async def create_inclusion(self, package_id: UUID, title: str, description: str) -> Inclusion:
        if not await self.core.services.package.has_package(package_id):
            raise NotFoundError(f"Package '{package_id}' not found")
        inclusion = Inclusion(package_id=package_id, title=title, description=description)
        await self._collection.insert_one(inclusion.to_mongo())
        return inclusion

    async def update_inclusion(self, inclusion_id: UUID, title: str | None, description: str | None) -> Inclusion:
        changes = {key: value for key, value in (("title", title), ("description", description)) if value is not None}
        if changes:
            doc = await self._collection.find_one_and_update(
                {"_id": inclusion_id}, {"$set": changes}, return_document=ReturnDocument.AFTER
            )
        else:
            doc = await self._collection.find_one({"_id": inclusion_id})
        inclusion = Inclusion.from_mongo(doc)
        if inclusion is None:
            raise NotFoundError(f"Inclusion '{inclusion_id}' not found")
        return inclusion

    async def delete_inclusion(self, inclusion_id: UUID) -> None:
        result = await self._collection.delete_one({"_id": inclusion_id})
        if result.deleted_count == 0:
            raise NotFoundError(f"Inclusion '{inclusion_id}' not found")

    async def delete_inclusions_by_package(self, package_id: UUID) -> int:
        """Delete all inclusions of a package and return count of deleted inclusions."""
        result = await self._collection.delete_many({"package_id": package_id})
        return result.deleted_count
