from uuid import UUID

from pydantic import Field

from villatours.core.db import MongoModel


class Inclusion(MongoModel):
    """Something included in a package price (meals, transfers, entrance tickets).

    Indexed on package_id.
    """

    package_id: UUID
    title: str = Field(..., min_length=1)
    description: str = ""
