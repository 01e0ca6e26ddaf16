from __future__ import annotations

import logging
from pathlib import PurePath
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from batchembed.embeddingpipeline.contracts import EmbedInput, EmbedRequest, TruncateStrategy
from batchembed.textextraction.errors import ExtractionError

from ..auth import require_api_key
from ..container import ServiceContainer
from ..deps import get_container
from ..errors import InvalidRequestError, PayloadTooLargeError

logger = logging.getLogger("apigateway.embeddings")

router = APIRouter(tags=["embeddings"], dependencies=[Depends(require_api_key)])

ALLOWED_UPLOAD_SUFFIXES = (".pdf", ".txt")
_STRATEGIES = {s.value for s in TruncateStrategy}


@router.post("/embed")
def embed(req: EmbedRequest, c: ServiceContainer = Depends(get_container)):
    s = c.settings
    if len(req.inputs) > s.MAX_BATCH_SIZE:
        raise PayloadTooLargeError("Batch size exceeds maximum allowed")
    if req.chunk_size is not None and (req.chunk_size < 0 or req.chunk_size > s.MAX_CHUNK_SIZE):
        raise InvalidRequestError("Invalid chunk_size")
    if req.truncate_strategy and req.truncate_strategy not in _STRATEGIES:
        raise InvalidRequestError("truncate_strategy must be 'truncate' or 'split'")

    resp = c.pipeline.embed_request(req)
    return resp.model_dump(exclude_none=True)


@router.post("/embed/file")
def embed_file(
    file: UploadFile = File(...),
    model: Optional[str] = Form(None),
    truncate_strategy: str = Form(TruncateStrategy.SPLIT.value),
    normalize: str = Form("true"),
    c: ServiceContainer = Depends(get_container),
):
    s = c.settings
    filename = file.filename or ""
    if PurePath(filename).suffix.lower() not in ALLOWED_UPLOAD_SUFFIXES:
        raise InvalidRequestError("Unsupported file type. Only PDF and TXT files are allowed.")

    limit = s.SYNC_FILE_LIMIT_MB * 1024 * 1024
    raw = file.file.read(limit + 1)
    if len(raw) > limit:
        raise PayloadTooLargeError(
            "File too large for synchronous processing. Use /v1/jobs for async processing."
        )

    try:
        text = c.extractor.extract(filename, raw)
    except ExtractionError as e:
        raise InvalidRequestError(str(e))

    req = EmbedRequest(
        model=model or s.EMBEDDING_MODEL,
        inputs=[EmbedInput(id=filename, text=text)],
        truncate_strategy=truncate_strategy,
        chunk_size=s.DEFAULT_CHUNK_SIZE,
        normalize=normalize.lower() == "true",
    )
    logger.info("embed_file filename=%s bytes=%d", filename, len(raw))
    return c.pipeline.embed_request(req).model_dump(exclude_none=True)
