from typing import Any, Dict, Optional, Union
from pydantic import BaseModel, StrictFloat, StrictInt


class OrderCreateRequest(BaseModel):
    amount: Optional[Union[StrictInt, StrictFloat]] = None  # Amount in smallest currency unit (e.g., paise)
    currency: str = "INR"
    receipt: Optional[str] = None


class OrderResponse(BaseModel):
    order: Dict[str, Any]


class PaymentVerificationRequest(BaseModel):
    # Optional so that a missing field is reported as "missing parameters"
    razorpay_order_id: Optional[str] = None
    razorpay_payment_id: Optional[str] = None
    razorpay_signature: Optional[str] = None


class VerificationResponse(BaseModel):
    ok: bool
    msg: str


class PublicConfig(BaseModel):
    key: Optional[str] = None
