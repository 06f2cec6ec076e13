"""
Rate Limiting for the Scholarship Portal API
============================================
Implements rate limiting using slowapi.

Only the credential endpoints carry explicit limits:
- /auth/login: LOGIN_RATE_LIMIT (brute force protection)
- /auth/register: REGISTER_RATE_LIMIT

Storage defaults to in-process memory; point RATE_LIMIT_STORAGE_URI at a
shared backend (e.g. redis://) when running several workers.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse

from scholarship.core.config import settings
from scholarship.core.logging_config import logger


def get_client_identifier(request: Request) -> str:
    """Rate limit key: authenticated user if known, else client IP"""
    user_id = getattr(request.state, 'user_id', None)
    if user_id:
        return f"user:{user_id}"
    return f"ip:{get_remote_address(request)}"


limiter = Limiter(
    key_func=get_client_identifier,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """Return a JSON 429 with a Retry-After hint"""
    logger.warning(
        f"[RateLimit] Exceeded for {get_client_identifier(request)}: {exc.detail}"
    )

    return JSONResponse(
        status_code=429,
        content={
            "msg": "Too many requests. Please slow down.",
            "code": "RATE_LIMITED",
            "details": {"limit": str(exc.detail)},
        },
        headers={"Retry-After": "60"},
    )


def login_rate_limit():
    """Rate limit for the login endpoint"""
    return limiter.limit(settings.LOGIN_RATE_LIMIT)


def register_rate_limit():
    """Rate limit for the self-registration endpoint"""
    return limiter.limit(settings.REGISTER_RATE_LIMIT)
