from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from app.api.deps import get_payment_service
from app.core.errors import SignatureMismatch
from app.schemas.common import ErrorResponse
from app.schemas.payment import (
    OrderCreateRequest,
    OrderResponse,
    PaymentVerificationRequest,
    VerificationResponse,
)
from app.services.payment_service import PaymentService

router = APIRouter()


@router.post(
    "/create-order",
    response_model=OrderResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def create_order(
    request: OrderCreateRequest,
    service: PaymentService = Depends(get_payment_service),
):
    """
    Create a Razorpay order for payment.

    Accepts: amount (smallest currency unit), currency, receipt
    Returns: the gateway order object
    """
    # The SDK call is blocking; keep it off the event loop.
    order = await run_in_threadpool(
        service.create_order, request.amount, request.currency, request.receipt
    )
    return OrderResponse(order=order)


@router.post(
    "/verify",
    response_model=VerificationResponse,
    responses={400: {"model": VerificationResponse}},
)
async def verify_payment(
    request: PaymentVerificationRequest,
    service: PaymentService = Depends(get_payment_service),
):
    """
    Verify the signature handed back by the checkout widget.
    """
    try:
        return service.verify_payment(
            request.razorpay_order_id,
            request.razorpay_payment_id,
            request.razorpay_signature,
        )
    except SignatureMismatch as e:
        return JSONResponse(status_code=400, content={"ok": False, "msg": e.message})
