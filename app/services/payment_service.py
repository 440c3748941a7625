import json
import logging
import time
from typing import Any, Dict, Optional
from app.core.errors import SignatureMismatch, ValidationError
from app.services.gateway import PaymentGateway

logger = logging.getLogger(__name__)


def default_receipt() -> str:
    return f"rcpt_{int(time.time() * 1000)}"


class PaymentService:
    def __init__(self, gateway: PaymentGateway, webhook_secret: str = ""):
        self.gateway = gateway
        self.webhook_secret = webhook_secret

    def create_order(self, amount: Any, currency: str = "INR", receipt: Optional[str] = None) -> Dict[str, Any]:
        """
        Create a gateway order for `amount` in the smallest currency unit.
        The vendor's order object is returned as-is.
        """
        # bool is an int subclass; JSON true must not pass as an amount
        if amount is None or isinstance(amount, bool) or not isinstance(amount, (int, float)):
            raise ValidationError("amount (number, in smallest currency unit) required")
        if amount <= 0:
            raise ValidationError("amount must be positive")
        if isinstance(amount, float):
            if not amount.is_integer():
                raise ValidationError("amount must be a whole number of the smallest currency unit")
            amount = int(amount)

        return self.gateway.create_order(
            amount=amount,
            currency=currency or "INR",
            receipt=receipt or default_receipt(),
        )

    def verify_payment(self, order_id: Optional[str], payment_id: Optional[str], signature: Optional[str]) -> Dict[str, Any]:
        """
        Check the signature returned by the checkout widget.

        The gateway checks HMAC-SHA256(key_secret, "<order_id>|<payment_id>").
        Raises ValidationError when a field is missing and SignatureMismatch
        when the signature differs.
        """
        if not order_id or not payment_id or not signature:
            raise ValidationError("missing parameters")

        try:
            self.gateway.verify_payment_signature(order_id, payment_id, signature)
        except SignatureMismatch:
            logger.warning(f"Payment signature mismatch for order {order_id}")
            raise

        logger.info(f"Payment {payment_id} verified for order {order_id}")
        return {"ok": True, "msg": "signature verified"}

    def verify_webhook(self, body: bytes, signature: Optional[str]) -> Optional[str]:
        """
        Verify a webhook delivery against the raw request bytes.

        `body` must be exactly what was received; re-serialized JSON will not
        match the sender's signature. Returns the event name for logging.
        """
        if not signature:
            logger.warning("Webhook missing signature")
            raise ValidationError("missing signature")

        try:
            self.gateway.verify_webhook_signature(body, signature, self.webhook_secret)
        except SignatureMismatch:
            logger.warning("Invalid webhook signature")
            raise

        event = self._event_name(body)
        logger.info(f"WEBHOOK RECEIVED: {event}")
        return event

    @staticmethod
    def _event_name(body: bytes) -> Optional[str]:
        try:
            payload = json.loads(body)
        except (UnicodeDecodeError, json.JSONDecodeError):
            logger.warning("Verified webhook body is not JSON")
            return None
        if isinstance(payload, dict):
            return payload.get("event")
        return None
