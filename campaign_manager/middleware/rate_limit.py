from slowapi import Limiter
from slowapi.util import get_remote_address
from fastapi import Request
from slowapi.errors import RateLimitExceeded
from fastapi.responses import JSONResponse

from campaign_manager.core.settings import settings

limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit_default])

async def _rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(status_code=429, content={"error": "Rate limit exceeded", "type": "RATE_LIMITED", "details": str(exc.detail)})
