from __future__ import annotations

import logging
import threading
import time
import uuid
from typing import Callable, Dict, List, Optional, Sequence

from .contracts import Job, JobPriority, JobStatus
from .errors import InvalidTransition, JobNotFound

logger = logging.getLogger("jobregistry.repository")

TimeFn = Callable[[], float]


class InMemoryJobRegistry:
    """
    Process-local store of job records keyed by job_id.

    Every accessor runs under one coarse lock and hands out deep copies, so a
    caller's mutations only become visible through update(). State lives only
    as long as the process.
    """

    def __init__(self, now: Optional[TimeFn] = None) -> None:
        self._lock = threading.RLock()
        self._jobs: Dict[str, Job] = {}
        self._now = now or time.time

    def create(
        self,
        files: Sequence[str],
        model: str,
        callback_url: Optional[str] = None,
        priority: JobPriority = JobPriority.NORMAL,
    ) -> Job:
        with self._lock:
            ts = self._now()
            job = Job(
                job_id=str(uuid.uuid4()),
                status=JobStatus.QUEUED,
                progress=0,
                files=list(files),
                model=model,
                callback_url=callback_url or None,
                priority=priority,
                created_at=ts,
                updated_at=ts,
            )
            self._jobs[job.job_id] = job
            logger.info("job_created job_id=%s files=%d model=%s", job.job_id, len(job.files), model)
            return job.model_copy(deep=True)

    def get(self, job_id: str) -> Optional[Job]:
        with self._lock:
            job = self._jobs.get(job_id)
            return job.model_copy(deep=True) if job else None

    def update(self, job: Job) -> Job:
        """Replace the stored record with ``job`` and stamp updated_at.

        The caller supplies the full record; there is no field merge.
        """
        with self._lock:
            current = self._jobs.get(job.job_id)
            if current is None:
                raise JobNotFound(job.job_id)
            self._check_transition(current, job)

            stored = job.model_copy(deep=True)
            stored.created_at = current.created_at
            stored.updated_at = max(self._now(), current.updated_at)
            self._jobs[stored.job_id] = stored
            job.updated_at = stored.updated_at
            return stored.model_copy(deep=True)

    def discard(self, job_id: str) -> bool:
        """Drop a record that was never handed to a worker."""
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None or job.status != JobStatus.QUEUED:
                return False
            del self._jobs[job_id]
            logger.info("job_discarded job_id=%s", job_id)
            return True

    def queue_depth(self) -> int:
        with self._lock:
            return sum(
                1 for j in self._jobs.values() if j.status in (JobStatus.QUEUED, JobStatus.RUNNING)
            )

    def list(self) -> List[Job]:
        with self._lock:
            return [j.model_copy(deep=True) for j in self._jobs.values()]

    # ------------------------
    # Helpers
    # ------------------------
    @staticmethod
    def _check_transition(current: Job, new: Job) -> None:
        if current.status.terminal:
            raise InvalidTransition(f"job {current.job_id} is already {current.status.value}")
        if new.status.rank < current.status.rank:
            raise InvalidTransition(
                f"job {current.job_id}: {current.status.value} -> {new.status.value} goes backwards"
            )
        if new.progress < current.progress:
            raise InvalidTransition(
                f"job {current.job_id}: progress {current.progress} -> {new.progress} decreases"
            )
        problems = new.invariant_violations()
        if problems:
            raise InvalidTransition(f"job {current.job_id}: " + "; ".join(problems))
