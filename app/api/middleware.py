import logging

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from limits import parse
from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.datastructures import Headers
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.core.errors import error_body

logger = logging.getLogger(__name__)

# The hosted checkout widget loads from checkout.razorpay.com and talks to api.razorpay.com.
CONTENT_SECURITY_POLICY = "; ".join(
    [
        "default-src 'self'",
        "script-src 'self' 'unsafe-inline' https://checkout.razorpay.com",
        "style-src 'self' 'unsafe-inline'",
        "frame-src 'self' https://api.razorpay.com https://checkout.razorpay.com",
        "connect-src 'self' https://api.razorpay.com",
        "img-src 'self' data: https:",
        "object-src 'none'",
        "base-uri 'self'",
    ]
)

SECURITY_HEADERS = {
    "Content-Security-Policy": CONTENT_SECURITY_POLICY,
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Attach the standard security headers to every response."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response


class BodySizeLimitMiddleware:
    """
    Reject request bodies larger than max_bytes with 413.

    A declared Content-Length is checked up front. Bodies without one
    (chunked uploads) are counted as they are received; once the total passes
    the limit the app sees a disconnect, its response is dropped and 413 is
    sent instead.
    """

    def __init__(self, app: ASGIApp, max_bytes: int):
        self.app = app
        self.max_bytes = max_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        length = Headers(scope=scope).get("content-length")
        if length is not None:
            try:
                declared = int(length)
            except ValueError:
                response = JSONResponse(status_code=400, content=error_body("invalid content-length"))
                await response(scope, receive, send)
                return
            if declared > self.max_bytes:
                await self._reject(scope, receive, send, declared)
                return

        received = 0
        exceeded = False

        async def limited_receive() -> Message:
            nonlocal received, exceeded
            if exceeded:
                return {"type": "http.disconnect"}
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_bytes:
                    exceeded = True
                    return {"type": "http.disconnect"}
            return message

        async def guarded_send(message: Message) -> None:
            if not exceeded:
                await send(message)

        try:
            await self.app(scope, limited_receive, guarded_send)
        except Exception:
            # Errors caused by the cut-off body are replaced by the 413 below.
            if not exceeded:
                raise
        if exceeded:
            await self._reject(scope, receive, send, received)

    async def _reject(self, scope: Scope, receive: Receive, send: Send, size: int) -> None:
        logger.warning(f"Rejected {scope.get('path')}: body of at least {size} bytes")
        response = JSONResponse(status_code=413, content=error_body("request body too large"))
        await response(scope, receive, send)


class RateLimitMiddleware:
    """
    Count every HTTP request against one per-client limit.

    Checked here rather than through slowapi's route lookup, which does not
    see routes added with include_router on every FastAPI release.
    """

    def __init__(self, app: ASGIApp, limiter: Limiter, limit: str):
        self.app = app
        self.limiter = limiter
        self.limit = parse(limit)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http":
            key = get_remote_address(Request(scope))
            if not self.limiter.limiter.hit(self.limit, "global", key):
                logger.warning(f"Rate limit exceeded for {key}")
                response = JSONResponse(
                    status_code=429,
                    content=error_body(f"rate limit exceeded: {self.limit}"),
                    headers={"Retry-After": str(self.limit.get_expiry())},
                )
                await response(scope, receive, send)
                return
        await self.app(scope, receive, send)


def setup_rate_limiter(app: FastAPI, per_minute: int) -> Limiter:
    """Attach a per-IP limiter applying `per_minute` to every request."""
    limiter = Limiter(key_func=get_remote_address)
    app.state.limiter = limiter
    app.add_middleware(RateLimitMiddleware, limiter=limiter, limit=f"{per_minute}/minute")
    logger.info(f"Rate limiter configured ({per_minute}/min per client)")
    return limiter
