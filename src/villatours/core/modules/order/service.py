from typing import Any
from uuid import UUID

import structlog
from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase

from villatours.core.core import Service
from villatours.core.modules.counter.models import CounterType
from villatours.core.modules.order.models import Customer, Order, OrderStatus
from villatours.core.modules.package.models import Package
from villatours.core.modules.payhere import signing
from villatours.core.modules.payhere.models import (
    LIVE_CHECKOUT_URL,
    SANDBOX_CHECKOUT_URL,
    CheckoutForm,
    PayHereNotification,
    PayHereStatus,
)
from villatours.errors import NotFoundError, ValidationError
from villatours.utils import now

logger = structlog.get_logger(__name__)


class OrderService(Service):
    """Creates booking orders and applies PayHere payment notifications."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("orders")

    async def on_start(self) -> None:
        await self._collection.create_index([("order_number", 1)], unique=True)

    async def create_order(self, package: Package, travellers: int, customer: Customer) -> Order:
        if travellers < 1:
            raise ValidationError("At least one traveller is required")
        order_number = await self.core.services.counter.get_next_sequence(CounterType.ORDER)
        order = Order(
            order_number=order_number,
            package_id=package.id,
            package_title=package.title,
            travellers=travellers,
            amount=round(package.price * travellers, 2),
            currency=package.currency,
            customer=customer,
        )
        await self._collection.insert_one(order.to_mongo())
        logger.info("order_created", order_number=order_number, package_id=package.id)
        return order

    async def get_order(self, order_id: UUID) -> Order:
        order = Order.from_mongo(await self._collection.find_one({"_id": order_id}))
        if order is None:
            raise NotFoundError(f"Order '{order_id}' not found")
        return order

    async def get_order_by_number(self, order_number: int) -> Order:
        order = Order.from_mongo(await self._collection.find_one({"order_number": order_number}))
        if order is None:
            raise NotFoundError(f"Order '{order_number}' not found")
        return order

    def build_checkout_form(self, order: Order) -> CheckoutForm:
        """Signed form fields for redirecting the customer to PayHere."""
        config = self.core.config
        order_id = str(order.order_number)
        return CheckoutForm(
            checkout_url=SANDBOX_CHECKOUT_URL if config.payhere_sandbox else LIVE_CHECKOUT_URL,
            merchant_id=config.payhere_merchant_id,
            return_url=config.payhere_return_url,
            cancel_url=config.payhere_cancel_url,
            notify_url=config.payhere_notify_url,
            order_id=order_id,
            items=f"{order.package_title} x {order.travellers}",
            currency=order.currency,
            amount=signing.format_amount(order.amount),
            first_name=order.customer.first_name,
            last_name=order.customer.last_name,
            email=order.customer.email,
            phone=order.customer.phone,
            address=order.customer.address,
            city=order.customer.city,
            country=order.customer.country,
            hash=signing.checkout_hash(
                config.payhere_merchant_id, order_id, order.amount, order.currency, config.payhere_merchant_secret
            ),
        )

    async def apply_notification(self, notification: PayHereNotification) -> Order:
        """Verify a PayHere notification and record the resulting order status."""
        config = self.core.config
        if notification.merchant_id != config.payhere_merchant_id or not signing.verify_notification(
            notification.merchant_id,
            notification.order_id,
            notification.payhere_amount,
            notification.payhere_currency,
            notification.status_code,
            notification.md5sig,
            config.payhere_merchant_secret,
        ):
            logger.warning("payhere_signature_invalid", order_id=notification.order_id)
            raise ValidationError("Invalid payment notification signature")

        try:
            order_number = int(notification.order_id)
            status = OrderStatus.from_payhere(PayHereStatus(notification.status_code))
        except ValueError as exc:
            raise ValidationError("Invalid payment notification") from exc

        doc = await self._collection.find_one_and_update(
            {"order_number": order_number},
            {"$set": {"status": status, "payment_id": notification.payment_id or None, "updated_at": now()}},
            return_document=ReturnDocument.AFTER,
        )
        order = Order.from_mongo(doc)
        if order is None:
            raise NotFoundError(f"Order '{order_number}' not found")
        logger.info("order_status_updated", order_number=order_number, status=status)
        return order
