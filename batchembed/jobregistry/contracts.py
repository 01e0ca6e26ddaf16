from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class JobStatus(str, Enum):
    QUEUED = "queued"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)

    @property
    def rank(self) -> int:
        return _RANK[self]


_RANK = {
    JobStatus.QUEUED: 0,
    JobStatus.RUNNING: 1,
    JobStatus.COMPLETED: 2,
    JobStatus.FAILED: 2,
}


class JobPriority(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"


class ErrorCode(str, Enum):
    DOWNLOAD_FAILED = "download_failed"
    EXTRACTION_FAILED = "extraction_failed"
    EMBEDDING_FAILED = "embedding_failed"
    STORAGE_FAILED = "storage_failed"


class JobError(BaseModel):
    code: str
    message: str


class Job(BaseModel):
    job_id: str
    status: JobStatus = JobStatus.QUEUED
    progress: int = Field(0, ge=0, le=100)
    files: List[str] = Field(default_factory=list)
    model: str
    callback_url: Optional[str] = None
    priority: JobPriority = JobPriority.NORMAL
    result_urls: Optional[List[str]] = None
    error: Optional[JobError] = None
    created_at: float
    updated_at: float

    def invariant_violations(self) -> List[str]:
        problems: List[str] = []
        if (self.result_urls is not None) != (self.status == JobStatus.COMPLETED):
            problems.append("result_urls must be set iff status is completed")
        if (self.error is not None) != (self.status == JobStatus.FAILED):
            problems.append("error must be set iff status is failed")
        if (self.progress == 100) != (self.status == JobStatus.COMPLETED):
            problems.append("progress reaches 100 only when completed")
        return problems

    def public_view(self) -> Dict[str, Any]:
        view: Dict[str, Any] = {
            "job_id": self.job_id,
            "status": self.status.value,
            "progress": self.progress,
        }
        if self.result_urls is not None:
            view["result_urls"] = list(self.result_urls)
        if self.error is not None:
            view["error"] = self.error.model_dump()
        return view
