from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query

from villatours.core.modules.package.models import Package, PackageData, PackageUpdate
from villatours.core.pagination import PaginationResult
from villatours.web.deps import AppDep, AuthTokenDep
from villatours.web.openapi import ErrorResponse

router = APIRouter(tags=["packages"])


@router.get(
    "",
    summary="List packages",
    description="Get packages, newest first.",
    operation_id="listPackages",
    responses={200: {"description": "Paginated list of packages"}},
)
async def list_packages(
    app: AppDep,
    limit: Annotated[int, Query(ge=1, le=100)] = 50,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> PaginationResult[Package]:
    return await app.get_packages(limit, offset)


@router.get(
    "/{package_id}",
    summary="Get package",
    operation_id="getPackage",
    responses={
        200: {"description": "Package details"},
        404: {"model": ErrorResponse, "description": "Package not found"},
    },
)
async def get_package(package_id: UUID, app: AppDep) -> Package:
    return await app.get_package(package_id)


@router.post(
    "",
    summary="Create package",
    operation_id="createPackage",
    status_code=201,
    responses={
        201: {"description": "Package created"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def create_package(data: PackageData, app: AppDep, auth_token: AuthTokenDep) -> Package:
    return await app.create_package(auth_token, data)


@router.put(
    "/{package_id}",
    summary="Update package",
    description="Partial update, only fields present in the body are changed.",
    operation_id="updatePackage",
    responses={
        200: {"description": "Updated package"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Package not found"},
    },
)
async def update_package(package_id: UUID, update: PackageUpdate, app: AppDep, auth_token: AuthTokenDep) -> Package:
    return await app.update_package(auth_token, package_id, update)


@router.delete(
    "/{package_id}",
    summary="Delete package",
    description="Delete a package and all of its inclusions.",
    operation_id="deletePackage",
    status_code=204,
    responses={
        204: {"description": "Package deleted"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Package not found"},
    },
)
async def delete_package(package_id: UUID, app: AppDep, auth_token: AuthTokenDep) -> None:
    await app.delete_package(auth_token, package_id)
