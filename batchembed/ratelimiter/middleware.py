from __future__ import annotations

import re
from typing import List, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import JSONResponse

from .service import RateLimiterService


def client_key(request: Request) -> str:
    """RapidAPI user, else the Authorization header, else the client IP."""
    user = request.headers.get("X-RapidAPI-User")
    if user:
        return f"rapidapi:{user}"
    auth = request.headers.get("Authorization")
    if auth:
        return f"auth:{auth}"
    return f"ip:{request.client.host if request.client else 'unknown'}"


class RateLimiterMiddleware(BaseHTTPMiddleware):
    """Per-client token bucket in front of every non-exempt route."""

    def __init__(self, app, service: RateLimiterService, skip_paths: Optional[List[str]] = None):
        super().__init__(app)
        self.service = service
        self.skip_paths = skip_paths or [r"^/v1/health$"]

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        if request.method.upper() == "OPTIONS" or any(re.search(p, path) for p in self.skip_paths):
            return await call_next(request)

        result = self.service.consume(client_key(request))
        policy = self.service.policy
        headers = {
            "X-RateLimit-Limit": f"{policy.rate:g};burst={policy.burst}",
            "X-RateLimit-Remaining": str(max(0, int(result.remaining))),
        }

        if not result.allowed:
            headers["Retry-After"] = str(result.retry_after or 1)
            return JSONResponse(
                status_code=429,
                content={"code": "too_many_requests", "message": "Rate limit exceeded. Please slow down."},
                headers=headers,
            )

        response = await call_next(request)
        for k, v in headers.items():
            response.headers[k] = v
        return response
