from fastapi import APIRouter
from app.api.endpoints import payment, webhook
from app.core.config import settings
from app.schemas.common import HealthResponse
from app.schemas.payment import PublicConfig

api_router = APIRouter()
api_router.include_router(payment.router, prefix="/api/payments", tags=["payment"])
api_router.include_router(webhook.router, prefix="/webhook", tags=["webhook"])


@api_router.get("/config", response_model=PublicConfig, tags=["config"])
async def public_config():
    # Only the public key id is exposed; secrets stay on the server.
    return PublicConfig(key=settings.RAZORPAY_KEY_ID or None)


@api_router.get("/health", response_model=HealthResponse, tags=["health"])
async def health_check():
    return HealthResponse(ok=True)
