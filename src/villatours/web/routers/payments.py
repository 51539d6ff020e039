from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Form, Response
from pydantic import BaseModel, Field

from villatours.core.modules.order.models import Customer
from villatours.core.modules.payhere.models import CheckoutForm, PayHereNotification
from villatours.core.modules.session.models import CsrfTokenView
from villatours.web.cookies import CSRF_COOKIE, SESSION_COOKIE
from villatours.web.csrf import PaymentContextDep, csrf_exempt, payment_gate
from villatours.web.deps import AppDep, CookieSettingsDep, CsrfGateDep
from villatours.web.openapi import ErrorResponse

router = APIRouter(tags=["payments"], dependencies=[Depends(payment_gate)])


class CheckoutRequest(BaseModel):
    """Request to start a PayHere payment for a package."""

    package_id: UUID = Field(..., description="Package to book")
    travellers: int = Field(1, ge=1, description="Number of travellers")
    customer: Customer


class StatusResponse(BaseModel):
    success: bool
    message: str


@router.get(
    "/csrf-token",
    summary="Get CSRF token",
    description="Return the CSRF token of the payment session, minting it on first use.",
    operation_id="getCsrfToken",
    responses={
        200: {"description": "Token for the X-CSRF-Token header"},
        500: {"model": ErrorResponse, "description": "Session store unavailable"},
    },
)
async def get_csrf_token(context: PaymentContextDep) -> CsrfTokenView:
    session = context.require_session()
    return CsrfTokenView(csrf_token=session.csrf_token or "")


@router.post(
    "/checkout",
    summary="Start checkout",
    description="Create an order for the session and return the signed PayHere checkout form.",
    operation_id="checkout",
    responses={
        200: {"description": "PayHere checkout form fields"},
        403: {"model": ErrorResponse, "description": "Invalid or missing CSRF token"},
        404: {"model": ErrorResponse, "description": "Package not found"},
    },
)
async def checkout(req: CheckoutRequest, app: AppDep, context: PaymentContextDep) -> CheckoutForm:
    return await app.checkout(context.require_session(), req.package_id, req.travellers, req.customer)


@router.post(
    "/notify/payhere",
    summary="PayHere notification",
    description="Server-to-server callback from PayHere with the payment result.",
    operation_id="payhereNotify",
    responses={
        200: {"description": "Notification accepted"},
        400: {"model": ErrorResponse, "description": "Invalid signature"},
        404: {"model": ErrorResponse, "description": "Unknown order"},
    },
)
@csrf_exempt
async def payhere_notify(notification: Annotated[PayHereNotification, Form()], app: AppDep) -> StatusResponse:
    await app.handle_payhere_notification(notification)
    return StatusResponse(success=True, message="Notification processed")


@router.post(
    "/clear-order",
    summary="Clear order",
    description="Forget the order remembered on the payment session.",
    operation_id="clearOrder",
    responses={200: {"description": "Order cleared"}},
)
@csrf_exempt
async def clear_order(app: AppDep, context: PaymentContextDep) -> StatusResponse:
    await app.clear_order(context.session)
    return StatusResponse(success=True, message="Order cleared")


@router.post(
    "/logout",
    summary="Clear payment session",
    description="Destroy the payment session, then drop the session and CSRF cookies.",
    operation_id="paymentLogout",
    responses={
        200: {"description": "Session cleared"},
        500: {"model": ErrorResponse, "description": "Session could not be destroyed; cookies kept"},
    },
)
@csrf_exempt
async def logout(
    gate: CsrfGateDep, context: PaymentContextDep, cookies: CookieSettingsDep, response: Response
) -> StatusResponse:
    # Raises before any cookie is touched when the store refuses the delete
    await gate.logout(context)
    cookies.delete_cookie(response, SESSION_COOKIE)
    cookies.delete_cookie(response, CSRF_COOKIE)
    return StatusResponse(success=True, message="Session cleared")
