"""FastAPI binding of the payment session + CSRF gate.

Payment routers declare `dependencies=[Depends(payment_gate)]`; handlers that must
accept requests without a token are marked with `@csrf_exempt` at registration.
"""

from collections.abc import Callable
from typing import Annotated, Any

from fastapi import Depends, Request, Response

from villatours.core.modules.csrf.models import (
    CSRF_BODY_FIELD,
    CSRF_HEADER,
    UNSAFE_METHODS,
    GateContext,
    GateRequest,
)
from villatours.web.cookies import CSRF_COOKIE, SESSION_COOKIE
from villatours.web.deps import CookieSettingsDep, CsrfGateDep


def csrf_exempt[F: Callable[..., Any]](endpoint: F) -> F:
    """Mark a payment route as not requiring a CSRF token."""
    endpoint.requires_csrf = False  # type: ignore[attr-defined]
    return endpoint


def requires_csrf(request: Request) -> bool:
    endpoint = request.scope.get("endpoint")
    return bool(getattr(endpoint, "requires_csrf", True))


async def read_body_token(request: Request) -> str | None:
    """Read the `_csrf` field from a JSON or form body."""
    content_type = request.headers.get("content-type", "")
    value: object = None
    if content_type.startswith("application/json"):
        try:
            data = await request.json()
        except ValueError:
            return None
        if isinstance(data, dict):
            value = data.get(CSRF_BODY_FIELD)
    elif content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
        form = await request.form()
        value = form.get(CSRF_BODY_FIELD)
    return value if isinstance(value, str) else None


async def payment_gate(
    request: Request, response: Response, gate: CsrfGateDep, cookies: CookieSettingsDep
) -> GateContext:
    """Run the gate for the current request and attach the resulting cookies."""
    header_token = request.headers.get(CSRF_HEADER)
    route_requires_csrf = requires_csrf(request)
    body_token = None
    if route_requires_csrf and not header_token and request.method.upper() in UNSAFE_METHODS:
        body_token = await read_body_token(request)

    context = await gate.process(
        GateRequest(
            method=request.method,
            path=request.url.path,
            requires_csrf=route_requires_csrf,
            session_cookie=request.cookies.get(SESSION_COOKIE),
            header_token=header_token,
            body_token=body_token,
        )
    )

    if context.session is not None and context.session_created:
        cookies.set_cookie(
            response, SESSION_COOKIE, gate.sign_session_id(context.session.id), max_age=cookies.session_max_age
        )
    if context.issued_token:
        cookies.set_cookie(response, CSRF_COOKIE, context.issued_token)
    return context


PaymentContextDep = Annotated[GateContext, Depends(payment_gate)]
