"""PayHere request signing.

Both signatures are upper-case hex MD5 digests over concatenated fields, ending with
the upper-case MD5 of the merchant secret.
"""

import hashlib
import secrets


def _md5_upper(value: str) -> str:
    return hashlib.md5(value.encode("utf-8")).hexdigest().upper()  # noqa: S324


def format_amount(amount: float) -> str:
    """Format an amount the way PayHere expects it: two decimals, no thousands separator."""
    return f"{amount:.2f}"


def checkout_hash(merchant_id: str, order_id: str, amount: float, currency: str, merchant_secret: str) -> str:
    return _md5_upper(merchant_id + order_id + format_amount(amount) + currency + _md5_upper(merchant_secret))


def notification_signature(
    merchant_id: str, order_id: str, payhere_amount: str, payhere_currency: str, status_code: int, merchant_secret: str
) -> str:
    return _md5_upper(
        merchant_id + order_id + payhere_amount + payhere_currency + str(status_code) + _md5_upper(merchant_secret)
    )


def verify_notification(
    merchant_id: str,
    order_id: str,
    payhere_amount: str,
    payhere_currency: str,
    status_code: int,
    md5sig: str,
    merchant_secret: str,
) -> bool:
    expected = notification_signature(merchant_id, order_id, payhere_amount, payhere_currency, status_code, merchant_secret)
    return secrets.compare_digest(expected.encode("utf-8"), md5sig.upper().encode("utf-8"))
