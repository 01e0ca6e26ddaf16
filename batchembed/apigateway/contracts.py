from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from batchembed.jobregistry.contracts import JobPriority


class AsyncJobRequest(BaseModel):
    model: str = Field(..., min_length=1)
    files: List[str] = Field(..., min_length=1)
    callback_url: Optional[str] = None
    priority: JobPriority = JobPriority.NORMAL


class AsyncAcceptedResponse(BaseModel):
    job_id: str
    status: str
    message: str


class HealthResponse(BaseModel):
    status: str
    version: str
    queue_depth: int


class JobListResponse(BaseModel):
    jobs: List[Dict[str, Any]]
