from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from batchembed.resultstore.errors import ResultNotFound

from ..auth import require_api_key
from ..container import ServiceContainer
from ..deps import get_container
from ..errors import NotFoundError

router = APIRouter(prefix="/results", tags=["results"], dependencies=[Depends(require_api_key)])


@router.get("/{filename}")
def get_result(filename: str, c: ServiceContainer = Depends(get_container)):
    try:
        path = c.result_store.resolve(filename)
    except ResultNotFound:
        raise NotFoundError("Result not found")
    return FileResponse(path, media_type="application/json", filename=path.name)
