from typing import Annotated, cast

from fastapi import Depends, Request
from fastapi.security import APIKeyCookie, HTTPAuthorizationCredentials, HTTPBearer

from villatours.app import App
from villatours.core.modules.auth.models import AuthToken
from villatours.core.modules.csrf.gate import CsrfGate
from villatours.errors import AuthenticationError
from villatours.web.cookies import AUTH_COOKIE, CookieSettings

# Admin security schemes, both optional so either one may carry the token
bearer_scheme = HTTPBearer(auto_error=False)
cookie_scheme = APIKeyCookie(name=AUTH_COOKIE, auto_error=False)


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_csrf_gate(app: Annotated[App, Depends(get_app)]) -> CsrfGate:
    return app.csrf_gate


async def get_cookie_settings(request: Request) -> CookieSettings:
    return cast(CookieSettings, request.app.state.cookie_settings)


async def get_auth_token(
    app: Annotated[App, Depends(get_app)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)] = None,
    token_cookie: Annotated[str | None, Depends(cookie_scheme)] = None,
) -> AuthToken:
    """Return the first valid admin token: Bearer header, then the auth_token cookie."""
    candidates = []
    if credentials and credentials.scheme == "Bearer":
        candidates.append(credentials.credentials)
    if token_cookie:
        candidates.append(token_cookie)

    for candidate in candidates:
        auth_token = AuthToken(candidate)
        if await app.is_auth_token_valid(auth_token):
            return auth_token

    raise AuthenticationError


AppDep = Annotated[App, Depends(get_app)]
AuthTokenDep = Annotated[AuthToken, Depends(get_auth_token)]
CsrfGateDep = Annotated[CsrfGate, Depends(get_csrf_gate)]
CookieSettingsDep = Annotated[CookieSettings, Depends(get_cookie_settings)]
