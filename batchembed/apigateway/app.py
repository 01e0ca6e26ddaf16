from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from batchembed.ratelimiter import Policy, RateLimiterMiddleware, RateLimiterService
from batchembed.settings import AppSettings, get_settings

from .container import ServiceContainer
from .errors import ApiError
from .observability import RequestContextMiddleware
from .routers import embeddings, health, jobs, results

APP_NAME = "batch-embedding-api"

logger = logging.getLogger("apigateway.app")


def create_app(
    settings: Optional[AppSettings] = None,
    container: Optional[ServiceContainer] = None,
    rate_limiter: Optional[RateLimiterService] = None,
) -> FastAPI:
    settings = settings or (container.settings if container else get_settings())
    container = container or ServiceContainer.from_settings(settings)
    rate_limiter = rate_limiter or RateLimiterService(
        Policy(rate=settings.RATE_LIMIT_PER_SECOND, burst=settings.RATE_LIMIT_BURST)
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        container.pool.start()
        try:
            yield
        finally:
            logger.info("shutting_down")
            container.pool.stop()
            container.close()

    app = FastAPI(title=APP_NAME, version=settings.APP_VERSION, lifespan=lifespan)
    app.state.container = container

    # last added runs first
    app.add_middleware(RateLimiterMiddleware, service=rate_limiter)
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Origin", "Content-Type", "Authorization", "X-RapidAPI-Key", "X-RapidAPI-Host"],
    )

    @app.exception_handler(ApiError)
    async def _api_error(request: Request, exc: ApiError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = "; ".join(
            f"{'.'.join(str(p) for p in e.get('loc', ()))}: {e.get('msg')}" for e in errors
        ) or "Invalid request"
        return JSONResponse(status_code=400, content={"code": "invalid_request", "message": message})

    app.include_router(health.router, prefix="/v1")
    app.include_router(embeddings.router, prefix="/v1")
    app.include_router(jobs.router, prefix="/v1")
    app.include_router(results.router, prefix="/v1")

    return app
