from uuid import UUID

from fastapi import APIRouter
from pydantic import BaseModel, Field

from villatours.core.modules.gallery.models import GalleryImage
from villatours.web.deps import AppDep, AuthTokenDep
from villatours.web.openapi import ErrorResponse

router = APIRouter(tags=["gallery"])


class AddImageRequest(BaseModel):
    image_url: str = Field(..., min_length=1, description="Absolute URL or site-relative path of the image")
    title: str = Field("", description="Image title")
    caption: str = Field("", description="Caption shown under the image")


@router.get("", summary="List gallery images", operation_id="listGalleryImages")
async def list_images(app: AppDep) -> list[GalleryImage]:
    return await app.get_gallery()


@router.post(
    "",
    summary="Add gallery image",
    operation_id="addGalleryImage",
    status_code=201,
    responses={
        201: {"description": "Image added"},
        400: {"model": ErrorResponse, "description": "Invalid image URL"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def add_image(req: AddImageRequest, app: AppDep, auth_token: AuthTokenDep) -> GalleryImage:
    return await app.add_gallery_image(auth_token, req.image_url, req.title, req.caption)


@router.delete(
    "/{image_id}",
    summary="Delete gallery image",
    operation_id="deleteGalleryImage",
    status_code=204,
    responses={
        204: {"description": "Image deleted"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Image not found"},
    },
)
async def delete_image(image_id: UUID, app: AppDep, auth_token: AuthTokenDep) -> None:
    await app.delete_gallery_image(auth_token, image_id)
