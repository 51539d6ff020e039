from fastapi import APIRouter, Response
from pydantic import BaseModel, Field

from villatours.core.modules.admin.models import AdminView
from villatours.core.modules.auth.models import ADMIN_SESSION_TTL
from villatours.web.cookies import AUTH_COOKIE
from villatours.web.deps import AppDep, AuthTokenDep, CookieSettingsDep
from villatours.web.openapi import ErrorResponse

router = APIRouter(tags=["admin"])


class LoginRequest(BaseModel):
    """Authentication request."""

    username: str = Field(..., description="Admin username")
    password: str = Field(..., description="Admin password")


class LoginResponse(BaseModel):
    """Authentication response."""

    token: str = Field(..., description="Authentication token for subsequent requests")


@router.post(
    "/login",
    summary="Authenticate admin",
    description="Authenticate with username and password to receive an authentication token.",
    operation_id="login",
    responses={
        200: {"description": "Successfully authenticated"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
    },
)
async def login(
    login_data: LoginRequest, app: AppDep, cookies: CookieSettingsDep, response: Response
) -> LoginResponse:
    token = await app.login(login_data.username, login_data.password)
    cookies.set_cookie(response, AUTH_COOKIE, token, max_age=ADMIN_SESSION_TTL)

    return LoginResponse(token=token)


@router.post(
    "/logout",
    summary="End admin session",
    description="Invalidate the current admin session.",
    operation_id="logout",
    status_code=204,
    responses={
        204: {"description": "Successfully logged out"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def logout(app: AppDep, auth_token: AuthTokenDep, cookies: CookieSettingsDep, response: Response) -> None:
    await app.logout(auth_token)
    cookies.delete_cookie(response, AUTH_COOKIE)


@router.get(
    "/me",
    summary="Current admin",
    description="Get the currently authenticated admin.",
    operation_id="getCurrentAdmin",
    responses={
        200: {"description": "Current admin"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def get_me(app: AppDep, auth_token: AuthTokenDep) -> AdminView:
    return await app.get_current_admin(auth_token)
