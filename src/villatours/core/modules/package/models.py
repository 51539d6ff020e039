"""Travel package models."""

from datetime import datetime

from pydantic import BaseModel, Field

from villatours.core.db import MongoModel
from villatours.utils import now


class PackageData(BaseModel):
    """Editable package attributes."""

    title: str = Field(..., min_length=1, description="Package name shown in listings")
    description: str = Field("", description="Itinerary and details")
    location: str = Field("", description="Destination, e.g. Ella or Sigiriya")
    duration_days: int = Field(1, ge=1, description="Tour length in days")
    price: float = Field(..., ge=0, description="Price per traveller")
    currency: str = Field("LKR", min_length=3, max_length=3, description="ISO 4217 currency code")
    images: list[str] = Field(default_factory=list, description="Image URLs, first one is the cover")
    trending: bool = Field(False, description="Whether the package appears in the trending listing")


class PackageUpdate(BaseModel):
    """Partial package update; only provided fields are changed."""

    title: str | None = Field(None, min_length=1)
    description: str | None = None
    location: str | None = None
    duration_days: int | None = Field(None, ge=1)
    price: float | None = Field(None, ge=0)
    currency: str | None = Field(None, min_length=3, max_length=3)
    images: list[str] | None = None
    trending: bool | None = None


class Package(PackageData, MongoModel):
    """Bookable travel package.

    Indexed on trending, created_at.
    """

    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)
