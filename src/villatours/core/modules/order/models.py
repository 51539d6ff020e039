"""Booking orders paid through PayHere."""

from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, Field

from villatours.core.db import MongoModel
from villatours.core.modules.payhere.models import PayHereStatus
from villatours.utils import now


class OrderStatus(StrEnum):
    PENDING = "pending"
    PAID = "paid"
    CANCELED = "canceled"
    FAILED = "failed"
    CHARGED_BACK = "charged_back"

    @classmethod
    def from_payhere(cls, status: PayHereStatus) -> "OrderStatus":
        return _PAYHERE_STATUSES[status]


_PAYHERE_STATUSES = {
    PayHereStatus.SUCCESS: OrderStatus.PAID,
    PayHereStatus.PENDING: OrderStatus.PENDING,
    PayHereStatus.CANCELED: OrderStatus.CANCELED,
    PayHereStatus.FAILED: OrderStatus.FAILED,
    PayHereStatus.CHARGED_BACK: OrderStatus.CHARGED_BACK,
}


class Customer(BaseModel):
    """Billing details forwarded to PayHere."""

    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+$")
    phone: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    country: str = Field("Sri Lanka", min_length=1)


class Order(MongoModel):
    """Booking of a package for a number of travellers.

    Indexed on order_number - unique.
    """

    order_number: int  # Sequential, sent to PayHere as order_id
    package_id: UUID
    package_title: str
    travellers: int
    amount: float
    currency: str
    customer: Customer
    status: OrderStatus = OrderStatus.PENDING
    payment_id: str | None = None  # PayHere payment id, set by the notify callback
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)


class OrderView(BaseModel):
    """Order summary returned to the customer."""

    order_number: int = Field(..., description="Order reference")
    package_title: str
    travellers: int
    amount: float
    currency: str
    status: OrderStatus

    @classmethod
    def from_domain(cls, order: Order) -> "OrderView":
        return cls(
            order_number=order.order_number,
            package_title=order.package_title,
            travellers=order.travellers,
            amount=order.amount,
            currency=order.currency,
            status=order.status,
        )
