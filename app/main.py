import logging
import os
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from app.core.config import settings
from app.core.errors import register_exception_handlers
from app.api.api import api_router
from app.api.middleware import BodySizeLimitMiddleware, SecurityHeadersMiddleware, setup_rate_limiter

# Logging Configuration
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ConfigError propagates and aborts startup
    settings.require_gateway_credentials()
    if not settings.WEBHOOK_SECRET:
        logger.warning("WEBHOOK_SECRET not set. Webhook signatures will be checked against an empty secret.")
    logger.info(f"{settings.PROJECT_NAME} started on port {settings.PORT}")
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        lifespan=lifespan,
    )

    # Middleware order: last added runs first
    if settings.BACKEND_CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    if settings.RATE_LIMIT_ENABLED:
        setup_rate_limiter(app, settings.RATE_LIMIT_PER_MINUTE)
    app.add_middleware(BodySizeLimitMiddleware, max_bytes=settings.MAX_BODY_BYTES)
    app.add_middleware(SecurityHeadersMiddleware)

    register_exception_handlers(app)

    app.include_router(api_router)

    # Static checkout page; mounted last so API routes take precedence
    if os.path.isdir(settings.STATIC_DIR):
        app.mount("/", StaticFiles(directory=settings.STATIC_DIR, html=True), name="static")
    else:
        logger.warning(f"Static directory {settings.STATIC_DIR} not found; checkout page disabled.")

    return app


app = create_app()
