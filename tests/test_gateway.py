"""Tests for the Razorpay gateway wrapper."""

import hashlib
import hmac
from unittest.mock import MagicMock

import pytest
from razorpay.errors import BadRequestError

from app.core.errors import ServiceError, SignatureMismatch
from app.services.gateway import RazorpayGateway


def _sign(secret, message):
    if isinstance(message, str):
        message = message.encode("utf-8")
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


@pytest.fixture
def razorpay_gateway():
    return RazorpayGateway("rzp_test_key", "testsecret")


def test_create_order_enables_auto_capture(razorpay_gateway):
    razorpay_gateway.client = MagicMock()
    razorpay_gateway.client.order.create.return_value = {"id": "order_1", "amount": 100, "currency": "INR"}

    order = razorpay_gateway.create_order(100, "INR", "rcpt_1")

    assert order == {"id": "order_1", "amount": 100, "currency": "INR"}
    razorpay_gateway.client.order.create.assert_called_once_with(
        data={"amount": 100, "currency": "INR", "receipt": "rcpt_1", "payment_capture": 1}
    )


def test_create_order_wraps_vendor_error(razorpay_gateway):
    razorpay_gateway.client = MagicMock()
    razorpay_gateway.client.order.create.side_effect = BadRequestError("Authentication failed")

    with pytest.raises(ServiceError) as excinfo:
        razorpay_gateway.create_order(100, "INR", "rcpt_1")

    assert excinfo.value.message == "could not create order"
    assert excinfo.value.details == "Authentication failed"


def test_verify_payment_signature_known_vector(razorpay_gateway):
    razorpay_gateway.verify_payment_signature("order_1", "pay_1", _sign("testsecret", "order_1|pay_1"))


@pytest.mark.parametrize(
    "order_id, payment_id",
    [("order_2", "pay_1"), ("order_1", "pay_2"), ("order_1 ", "pay_1")],
)
def test_verify_payment_signature_one_byte_change(razorpay_gateway, order_id, payment_id):
    signature = _sign("testsecret", "order_1|pay_1")
    with pytest.raises(SignatureMismatch):
        razorpay_gateway.verify_payment_signature(order_id, payment_id, signature)


def test_verify_payment_signature_uses_key_secret(razorpay_gateway):
    with pytest.raises(SignatureMismatch):
        razorpay_gateway.verify_payment_signature("order_1", "pay_1", _sign("othersecret", "order_1|pay_1"))


def test_verify_payment_signature_non_ascii_is_mismatch(razorpay_gateway):
    with pytest.raises(SignatureMismatch):
        razorpay_gateway.verify_payment_signature("order_1", "pay_1", "ü" * 64)


def test_verify_webhook_signature(razorpay_gateway):
    body = b'{"event": "payment.captured",  "payload": {}}'
    razorpay_gateway.verify_webhook_signature(body, _sign("whsecret", body), "whsecret")


def test_verify_webhook_signature_wrong_secret(razorpay_gateway):
    body = b'{"event": "payment.captured"}'
    with pytest.raises(SignatureMismatch):
        razorpay_gateway.verify_webhook_signature(body, _sign("whsecret", body), "testsecret")


def test_verify_webhook_signature_non_utf8_body_is_mismatch(razorpay_gateway):
    body = b"\xff\xfe{}"
    with pytest.raises(SignatureMismatch):
        razorpay_gateway.verify_webhook_signature(body, _sign("whsecret", body), "whsecret")


def test_verify_webhook_signature_non_ascii_is_mismatch(razorpay_gateway):
    with pytest.raises(SignatureMismatch):
        razorpay_gateway.verify_webhook_signature(b"{}", "ü" * 64, "whsecret")
