from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from villatours.core.modules.package.models import Package
from villatours.core.pagination import PaginationResult
from villatours.web.deps import AppDep, AuthTokenDep
from villatours.web.openapi import ErrorResponse

router = APIRouter(tags=["trending"])


class SetTrendingRequest(BaseModel):
    trending: bool = Field(..., description="Whether the package is listed as trending")


@router.get(
    "",
    summary="List trending packages",
    operation_id="listTrendingPackages",
    responses={200: {"description": "Paginated list of trending packages"}},
)
async def list_trending(
    app: AppDep,
    limit: Annotated[int, Query(ge=1, le=100)] = 50,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> PaginationResult[Package]:
    return await app.get_trending_packages(limit, offset)


@router.put(
    "/{package_id}",
    summary="Set trending flag",
    operation_id="setPackageTrending",
    responses={
        200: {"description": "Updated package"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Package not found"},
    },
)
async def set_trending(package_id: UUID, req: SetTrendingRequest, app: AppDep, auth_token: AuthTokenDep) -> Package:
    return await app.set_package_trending(auth_token, package_id, req.trending)
