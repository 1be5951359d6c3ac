from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse
from typing import Callable, Any, Optional
import logging

from services.rate_limiter import RateLimiter
from utils.get_env import env_flag, env_int, get_max_body_bytes_env, get_trust_proxy_headers_env

logger = logging.getLogger(__name__)

# Path prefixes that should have rate limiting applied
RATE_LIMITED_PREFIXES = ["/api/"]

DEFAULT_MAX_BODY_BYTES = 200 * 1024


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Per-IP rate limiting on the API paths"""

    def __init__(
        self,
        app,
        limiter: Optional[RateLimiter] = None,
        trust_proxy_headers: Optional[bool] = None,
    ):
        super().__init__(app)
        self.limiter = limiter or RateLimiter()
        self.trust_proxy_headers = (
            trust_proxy_headers
            if trust_proxy_headers is not None
            else env_flag(get_trust_proxy_headers_env(), False)
        )

    async def dispatch(self, request: Request, call_next: Callable) -> Any:
        path = request.url.path
        should_limit = any(path.startswith(prefix) for prefix in RATE_LIMITED_PREFIXES)

        if not should_limit or not self.limiter.enabled:
            return await call_next(request)

        identifier = self._get_identifier(request)
        is_allowed, headers = self.limiter.check(identifier, tokens_cost=1)

        if not is_allowed:
            logger.warning(f"Rate limit exceeded for {identifier} on {path}")
            return JSONResponse(
                status_code=429,
                content={
                    "ok": False,
                    "error": "Too many requests, please try again later.",
                },
                headers=headers,
            )

        response = await call_next(request)
        for key, value in headers.items():
            response.headers[key] = value
        return response

    def _get_identifier(self, request: Request) -> str:
        # X-Forwarded-For is client-controlled unless a proxy in front rewrites it
        forwarded = request.headers.get("X-Forwarded-For") if self.trust_proxy_headers else None
        if forwarded:
            return f"ip:{forwarded.split(',')[0].strip()}"
        client_ip = request.client.host if request.client else "unknown"
        return f"ip:{client_ip}"


class BodySizeLimitMiddleware(BaseHTTPMiddleware):
    """Reject requests whose declared body exceeds MAX_BODY_BYTES"""

    def __init__(self, app, max_body_bytes: Optional[int] = None):
        super().__init__(app)
        self.max_body_bytes = max_body_bytes or env_int(
            get_max_body_bytes_env(), DEFAULT_MAX_BODY_BYTES
        )

    async def dispatch(self, request: Request, call_next: Callable) -> Any:
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > self.max_body_bytes:
            logger.warning(
                f"Rejected {request.method} {request.url.path}: body of {content_length} bytes"
            )
            return JSONResponse(
                status_code=413,
                content={"ok": False, "error": "Request body too large."},
            )
        return await call_next(request)
