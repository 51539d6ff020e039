"""Tests for PayHere checkout and notification signatures."""

import hashlib

import pytest

from villatours.core.modules.payhere.signing import (
    checkout_hash,
    format_amount,
    notification_signature,
    verify_notification,
)

MERCHANT_ID = "1211149"
SECRET = "merchant-secret"


class TestFormatAmount:
    @pytest.mark.parametrize(
        ("amount", "expected"),
        [(1000, "1000.00"), (12.5, "12.50"), (0.1 + 0.2, "0.30"), (1234567.891, "1234567.89")],
    )
    def test_two_decimals_without_separators(self, amount, expected):
        assert format_amount(amount) == expected


class TestCheckoutHash:
    def test_matches_payhere_formula(self):
        hashed_secret = hashlib.md5(SECRET.encode()).hexdigest().upper()  # noqa: S324
        expected = hashlib.md5(f"{MERCHANT_ID}421000.00LKR{hashed_secret}".encode()).hexdigest().upper()  # noqa: S324

        assert checkout_hash(MERCHANT_ID, "42", 1000, "LKR", SECRET) == expected

    def test_is_uppercase_hex(self):
        value = checkout_hash(MERCHANT_ID, "1", 10.0, "USD", SECRET)
        assert len(value) == 32
        assert value == value.upper()

    def test_amount_changes_hash(self):
        assert checkout_hash(MERCHANT_ID, "1", 10.0, "LKR", SECRET) != checkout_hash(
            MERCHANT_ID, "1", 10.01, "LKR", SECRET
        )


class TestVerifyNotification:
    def test_accepts_valid_signature(self):
        sig = notification_signature(MERCHANT_ID, "42", "1000.00", "LKR", 2, SECRET)
        assert verify_notification(MERCHANT_ID, "42", "1000.00", "LKR", 2, sig, SECRET)

    def test_accepts_lowercase_signature(self):
        sig = notification_signature(MERCHANT_ID, "42", "1000.00", "LKR", 2, SECRET).lower()
        assert verify_notification(MERCHANT_ID, "42", "1000.00", "LKR", 2, sig, SECRET)

    def test_rejects_tampered_status(self):
        sig = notification_signature(MERCHANT_ID, "42", "1000.00", "LKR", -2, SECRET)
        assert not verify_notification(MERCHANT_ID, "42", "1000.00", "LKR", 2, sig, SECRET)

    def test_rejects_wrong_secret(self):
        sig = notification_signature(MERCHANT_ID, "42", "1000.00", "LKR", 2, "other-secret")
        assert not verify_notification(MERCHANT_ID, "42", "1000.00", "LKR", 2, sig, SECRET)
