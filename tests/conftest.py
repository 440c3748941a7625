"""Shared test fixtures."""

import os

# Settings are read at import time, so the environment is fixed before `app` is imported.
os.environ["RAZORPAY_KEY_ID"] = "rzp_test_key"
os.environ["RAZORPAY_KEY_SECRET"] = "testsecret"
os.environ["WEBHOOK_SECRET"] = "whsecret"
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.errors import ServiceError
from app.services.gateway import RazorpayGateway
from app.services.payment_service import PaymentService


class FakeGateway(RazorpayGateway):
    """
    Razorpay gateway with the network call replaced: create_order records its
    arguments and returns a canned order (or raises). Signature checks run
    through the real SDK utility.
    """

    def __init__(self, error: Exception = None):
        super().__init__("rzp_test_key", "testsecret")
        self.calls = []
        self.error = error

    def create_order(self, amount, currency, receipt):
        self.calls.append({"amount": amount, "currency": currency, "receipt": receipt})
        if self.error is not None:
            raise self.error
        return {
            "id": "order_test_1",
            "entity": "order",
            "amount": amount,
            "currency": currency,
            "receipt": receipt,
            "status": "created",
        }


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def failing_gateway():
    return FakeGateway(error=ServiceError("could not create order", details="Authentication failed"))


@pytest.fixture
def service(gateway):
    return PaymentService(gateway=gateway, webhook_secret="whsecret")


@pytest.fixture
def app(service):
    """Fresh application with the payment service swapped for one on a fake gateway."""
    from app.api.deps import get_payment_service
    from app.main import create_app

    _app = create_app()
    _app.dependency_overrides[get_payment_service] = lambda: service
    return _app


@pytest.fixture
async def client(app):
    """Async HTTP test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
