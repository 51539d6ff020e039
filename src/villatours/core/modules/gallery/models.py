from datetime import datetime

from pydantic import Field

from villatours.core.db import MongoModel
from villatours.utils import now


class GalleryImage(MongoModel):
    """Photo shown in the site gallery."""

    title: str = ""
    image_url: str
    caption: str = ""
    created_at: datetime = Field(default_factory=now)
