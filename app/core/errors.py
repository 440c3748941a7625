import logging
from typing import Any, Optional
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class CheckoutError(Exception):
    """Base exception for the checkout service."""

    status_code: int = 500

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class ValidationError(CheckoutError):
    """Missing or malformed request fields."""

    status_code = 400


class SignatureMismatch(CheckoutError):
    """Supplied signature does not match the recomputed HMAC."""

    status_code = 400


class ServiceError(CheckoutError):
    """The payment gateway call failed."""

    status_code = 500


class ConfigError(CheckoutError):
    """Required configuration is missing; raised at startup."""


def error_body(message: str, details: Optional[Any] = None) -> dict:
    content = {"error": message}
    if details is not None:
        content["details"] = details
    return content


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(CheckoutError)
    async def checkout_error_handler(request: Request, exc: CheckoutError):
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.message, exc.details),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        # Field-level errors only; the offending input is left out of the response.
        details = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg")}
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=400,
            content=error_body("invalid request", details),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Global exception on {request.url.path}: {exc!r}")
        return JSONResponse(
            status_code=500,
            content=error_body("Internal Server Error"),
        )
