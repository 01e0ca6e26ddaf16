from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status

from batchembed.workerpool.errors import WorkerPoolError

from ..auth import require_api_key
from ..container import ServiceContainer
from ..contracts import AsyncAcceptedResponse, AsyncJobRequest, JobListResponse
from ..deps import get_container
from ..errors import InvalidRequestError, NotFoundError, ServiceUnavailableError

logger = logging.getLogger("apigateway.jobs")

router = APIRouter(prefix="/jobs", tags=["jobs"], dependencies=[Depends(require_api_key)])


def _looks_like_file_ref(ref: str) -> bool:
    if ref.startswith(("http://", "https://")):
        return True
    # local paths are accepted for testing
    return "/" in ref or "\\" in ref


@router.post("", response_model=AsyncAcceptedResponse, status_code=status.HTTP_202_ACCEPTED)
def create_job(req: AsyncJobRequest, c: ServiceContainer = Depends(get_container)):
    for ref in req.files:
        if not _looks_like_file_ref(ref):
            raise InvalidRequestError(f"Invalid file URL: {ref}")

    if req.callback_url and not req.callback_url.startswith(("http://", "https://")):
        raise InvalidRequestError(f"Invalid callback URL: {req.callback_url}")
    if not c.pool.accepting:
        raise ServiceUnavailableError()

    job = c.registry.create(req.files, req.model, req.callback_url, priority=req.priority)
    try:
        # blocks while the queue is full
        c.pool.enqueue(job.job_id)
    except WorkerPoolError as e:
        c.registry.discard(job.job_id)
        logger.warning("enqueue_rejected job_id=%s error=%s", job.job_id, e)
        raise ServiceUnavailableError(str(e))

    return AsyncAcceptedResponse(job_id=job.job_id, status=job.status.value, message="Job accepted for processing")


@router.get("", response_model=JobListResponse)
def list_jobs(c: ServiceContainer = Depends(get_container)):
    return JobListResponse(jobs=[j.public_view() for j in c.registry.list()])


@router.get("/{job_id}")
def get_job(job_id: str, c: ServiceContainer = Depends(get_container)):
    job = c.registry.get(job_id)
    if job is None:
        raise NotFoundError("Job not found")
    return job.public_view()
