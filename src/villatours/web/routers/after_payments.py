from fastapi import APIRouter, Depends

from villatours.core.modules.order.models import OrderView
from villatours.web.csrf import PaymentContextDep, payment_gate
from villatours.web.deps import AppDep
from villatours.web.openapi import ErrorResponse

router = APIRouter(tags=["after-payments"], dependencies=[Depends(payment_gate)])


@router.get(
    "/order",
    summary="Current order",
    description="Get the order being paid for in the current payment session.",
    operation_id="getSessionOrder",
    responses={
        200: {"description": "Order summary"},
        404: {"model": ErrorResponse, "description": "No order in progress"},
    },
)
async def get_session_order(app: AppDep, context: PaymentContextDep) -> OrderView:
    return await app.get_session_order(context.require_session())


@router.get(
    "/orders/{order_number}",
    summary="Order status",
    description="Look up an order by its reference number, e.g. from the PayHere return page.",
    operation_id="getOrderStatus",
    responses={
        200: {"description": "Order summary"},
        404: {"model": ErrorResponse, "description": "Order not found"},
    },
)
async def get_order(order_number: int, app: AppDep) -> OrderView:
    return await app.get_order_by_number(order_number)
