from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import PlainTextResponse
from app.api.deps import get_payment_service
from app.core.errors import SignatureMismatch, ValidationError
from app.services.payment_service import PaymentService
import logging

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/razorpay", response_class=PlainTextResponse)
async def razorpay_webhook(
    request: Request,
    x_razorpay_signature: str = Header(None),
    service: PaymentService = Depends(get_payment_service),
):
    """
    Handle Razorpay webhook events.

    - Verifies the signature over the raw body using WEBHOOK_SECRET
    - Logs the event type
    - Returns 200 "ok"
    """
    try:
        # Raw bytes: the signature is over the body exactly as sent.
        body = await request.body()
        service.verify_webhook(body, x_razorpay_signature)
        return PlainTextResponse("ok")
    except (ValidationError, SignatureMismatch) as e:
        return PlainTextResponse(e.message, status_code=400)
    except Exception as e:
        logger.error(f"webhook handler error: {e!r}")
        return PlainTextResponse("err", status_code=500)
