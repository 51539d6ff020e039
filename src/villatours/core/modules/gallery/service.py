from typing import Any
from uuid import UUID

from pymongo.asynchronous.database import AsyncDatabase

from villatours.core.core import Service
from villatours.core.modules.gallery.models import GalleryImage
from villatours.errors import NotFoundError, ValidationError


class GalleryService(Service):
    """Manages gallery images."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("gallery")

    async def on_start(self) -> None:
        await self._collection.create_index([("created_at", -1)])

    async def list_images(self) -> list[GalleryImage]:
        return await GalleryImage.list_cursor(self._collection.find().sort("created_at", -1))

    async def add_image(self, image_url: str, title: str, caption: str) -> GalleryImage:
        if not image_url.startswith(("http://", "https://", "/")):
            raise ValidationError(f"Invalid image URL: '{image_url}'")
        image = GalleryImage(image_url=image_url, title=title, caption=caption)
        await self._collection.insert_one(image.to_mongo())
        return image

    async def delete_image(self, image_id: UUID) -> None:
        result = await self._collection.delete_one({"_id": image_id})
        if result.deleted_count == 0:
            raise NotFoundError(f"Image '{image_id}' not found")
