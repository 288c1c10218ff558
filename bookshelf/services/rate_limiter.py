"""
Rate Limiting Service

slowapi limiter shared by the routers.

Tiers (see Settings):
- rate_limit_default: reads (list, get, best rating)
- rate_limit_write: create, update, delete, rate
- rate_limit_auth: signup and login

Counters live in process memory ("memory://"), so limits apply per API
instance. Clients are keyed by the socket address; X-Forwarded-For is only
read when TRUST_PROXY_HEADERS is set, since any client can send that header.
"""

import logging

from fastapi import Request, status
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from bookshelf.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

RETRY_AFTER_SECONDS = 60


def get_client_ip(request: Request) -> str:
    """
    Rate limit key for a request.

    Behind a reverse proxy the first X-Forwarded-For entry is the client.
    """
    if settings.trust_proxy_headers:
        forwarded_for = request.headers.get("X-Forwarded-For", "")
        client_ip = forwarded_for.split(",")[0].strip()
        if client_ip:
            return client_ip

    return get_remote_address(request)


limiter = Limiter(
    key_func=get_client_ip,
    default_limits=[settings.rate_limit_default],
    storage_uri="memory://",
    strategy="fixed-window",
    enabled=settings.rate_limit_enabled,
)

logger.info(
    f"Rate limiter ready (enabled={settings.rate_limit_enabled}, "
    f"trust_proxy_headers={settings.trust_proxy_headers})"
)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Answer 429 in the same {"detail": ...} envelope as every other error."""
    logger.warning(
        f"Rate limit {exc.detail} exceeded by {get_client_ip(request)} "
        f"on {request.method} {request.url.path}"
    )

    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"detail": f"Too many requests: {exc.detail}"},
        headers={"Retry-After": str(RETRY_AFTER_SECONDS)},
    )
