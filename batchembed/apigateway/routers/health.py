from __future__ import annotations

from fastapi import APIRouter, Depends

from ..container import ServiceContainer
from ..contracts import HealthResponse
from ..deps import get_container

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health(c: ServiceContainer = Depends(get_container)):
    return HealthResponse(status="ok", version=c.settings.APP_VERSION, queue_depth=c.registry.queue_depth())
