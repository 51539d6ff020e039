from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from villatours.core.modules.inclusion.models import Inclusion
from villatours.web.deps import AppDep, AuthTokenDep
from villatours.web.openapi import ErrorResponse

router = APIRouter(tags=["inclusions"])


class CreateInclusionRequest(BaseModel):
    package_id: UUID = Field(..., description="Package the inclusion belongs to")
    title: str = Field(..., min_length=1, description="Short label, e.g. 'Airport transfer'")
    description: str = Field("", description="Details")


class UpdateInclusionRequest(BaseModel):
    title: str | None = Field(None, min_length=1)
    description: str | None = None


@router.get(
    "",
    summary="List inclusions",
    description="Get all inclusions, or only those of one package.",
    operation_id="listInclusions",
)
async def list_inclusions(app: AppDep, package_id: Annotated[UUID | None, Query()] = None) -> list[Inclusion]:
    return await app.get_inclusions(package_id)


@router.post(
    "",
    summary="Create inclusion",
    operation_id="createInclusion",
    status_code=201,
    responses={
        201: {"description": "Inclusion created"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Package not found"},
    },
)
async def create_inclusion(req: CreateInclusionRequest, app: AppDep, auth_token: AuthTokenDep) -> Inclusion:
    return await app.create_inclusion(auth_token, req.package_id, req.title, req.description)


@router.put(
    "/{inclusion_id}",
    summary="Update inclusion",
    operation_id="updateInclusion",
    responses={
        200: {"description": "Updated inclusion"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Inclusion not found"},
    },
)
async def update_inclusion(
    inclusion_id: UUID, req: UpdateInclusionRequest, app: AppDep, auth_token: AuthTokenDep
) -> Inclusion:
    return await app.update_inclusion(auth_token, inclusion_id, req.title, req.description)


@router.delete(
    "/{inclusion_id}",
    summary="Delete inclusion",
    operation_id="deleteInclusion",
    status_code=204,
    responses={
        204: {"description": "Inclusion deleted"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Inclusion not found"},
    },
)
async def delete_inclusion(inclusion_id: UUID, app: AppDep, auth_token: AuthTokenDep) -> None:
    await app.delete_inclusion(auth_token, inclusion_id)
