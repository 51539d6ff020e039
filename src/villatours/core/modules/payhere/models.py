"""PayHere checkout and notification payloads."""

from enum import IntEnum

from pydantic import BaseModel, Field

SANDBOX_CHECKOUT_URL = "https://sandbox.payhere.lk/pay/checkout"
LIVE_CHECKOUT_URL = "https://www.payhere.lk/pay/checkout"


class PayHereStatus(IntEnum):
    """status_code values sent to the notify URL."""

    SUCCESS = 2
    PENDING = 0
    CANCELED = -1
    FAILED = -2
    CHARGED_BACK = -3


class CheckoutForm(BaseModel):
    """Fields the browser posts to the PayHere checkout page."""

    checkout_url: str = Field(..., description="PayHere checkout endpoint (sandbox or live)")
    merchant_id: str
    return_url: str
    cancel_url: str
    notify_url: str
    order_id: str
    items: str
    currency: str
    amount: str = Field(..., description="Amount formatted with two decimals")
    first_name: str
    last_name: str
    email: str
    phone: str
    address: str
    city: str
    country: str
    hash: str = Field(..., description="Checkout signature")


class PayHereNotification(BaseModel):
    """Server-to-server payment notification."""

    merchant_id: str
    order_id: str
    payment_id: str = ""
    payhere_amount: str
    payhere_currency: str
    status_code: int
    md5sig: str
    status_message: str = ""
    method: str = ""
