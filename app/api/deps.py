from functools import lru_cache
from app.core.config import settings
from app.services.gateway import PaymentGateway, RazorpayGateway
from app.services.payment_service import PaymentService

# The Razorpay client only holds credentials and an HTTP session, so one
# instance is shared. Tests swap the whole service via app.dependency_overrides.


@lru_cache
def get_gateway() -> PaymentGateway:
    return RazorpayGateway(settings.RAZORPAY_KEY_ID, settings.RAZORPAY_KEY_SECRET)


def get_payment_service() -> PaymentService:
    return PaymentService(
        gateway=get_gateway(),
        webhook_secret=settings.WEBHOOK_SECRET,
    )
