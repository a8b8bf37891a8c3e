"""IP based rate limiting (SlowAPI), aware of X-Forwarded-For behind a proxy."""
from fastapi import Request

from slowapi import Limiter

from .config import settings


def client_ip(request: Request) -> str:
    """Real client IP behind Railway / Nginx."""
    xff = request.headers.get("x-forwarded-for")
    if xff:
        return xff.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "127.0.0.1"


DEFAULT_RATE_LIMIT = f"{settings.rate_limit_per_minute}/minute"
LOGIN_RATE_LIMIT = f"{settings.rate_limit_login_per_minute}/minute"

# Default limit is enforced by SlowAPIMiddleware; login routes add their own via @limiter.limit
limiter = Limiter(key_func=client_ip, default_limits=[DEFAULT_RATE_LIMIT])
