import logging
from typing import Any, Dict, Protocol
import razorpay
from razorpay.errors import SignatureVerificationError
from app.core.errors import ServiceError, SignatureMismatch

logger = logging.getLogger(__name__)


class PaymentGateway(Protocol):
    def create_order(self, amount: int, currency: str, receipt: str) -> Dict[str, Any]:
        ...

    def verify_payment_signature(self, order_id: str, payment_id: str, signature: str) -> None:
        ...

    def verify_webhook_signature(self, body: bytes, signature: str, secret: str) -> None:
        ...


class RazorpayGateway:
    """
    Thin wrapper around the Razorpay SDK client.

    Orders are created with auto-capture enabled. SDK and network failures
    are re-raised as ServiceError carrying the vendor message; nothing is retried.
    Signature checks go through `client.utility` and raise SignatureMismatch.
    """

    def __init__(self, key_id: str, key_secret: str):
        self.client = razorpay.Client(auth=(key_id, key_secret))

    def create_order(self, amount: int, currency: str, receipt: str) -> Dict[str, Any]:
        data = {
            "amount": amount,
            "currency": currency,
            "receipt": receipt,
            "payment_capture": 1,
        }

        try:
            return self.client.order.create(data=data)
        except Exception as e:
            logger.error(f"Error creating Razorpay order: {e}")
            raise ServiceError("could not create order", details=str(e)) from e

    def verify_payment_signature(self, order_id: str, payment_id: str, signature: str) -> None:
        params = {
            "razorpay_order_id": order_id,
            "razorpay_payment_id": payment_id,
            "razorpay_signature": signature,
        }
        try:
            self.client.utility.verify_payment_signature(params)
        # compare_digest raises TypeError for a non-ASCII signature
        except (SignatureVerificationError, TypeError) as e:
            raise SignatureMismatch("invalid signature") from e

    def verify_webhook_signature(self, body: bytes, signature: str, secret: str) -> None:
        try:
            # The SDK re-encodes as UTF-8, so valid UTF-8 round-trips to the same bytes.
            self.client.utility.verify_webhook_signature(body.decode("utf-8"), signature, secret)
        except (UnicodeDecodeError, SignatureVerificationError, TypeError) as e:
            raise SignatureMismatch("invalid signature") from e
