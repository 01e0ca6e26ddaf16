from __future__ import annotations

import logging
import queue
import threading
import time
from typing import List, Optional

from batchembed.embeddingpipeline.contracts import EmbedInput, EmbedResponse, TruncateStrategy
from batchembed.embeddingpipeline.service import EmbeddingPipeline
from batchembed.jobregistry.contracts import ErrorCode, Job, JobError, JobStatus
from batchembed.jobregistry.errors import RegistryError
from batchembed.jobregistry.repository import InMemoryJobRegistry

from .errors import EnqueueTimeout, PoolNotRunning
from .ports import FileFetcherPort, NotifierPort, ResultStorePort, TextExtractorPort

log = logging.getLogger("workerpool.service")


class _StageFailed(Exception):
    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code


class WorkerPool:
    """
    Fixed set of executor threads draining a bounded FIFO of job ids.

    Per job: fetch -> extract -> embed each file in order, then persist and
    mark completed. The first failing stage marks the job failed and drops
    whatever earlier files produced. Both terminal paths fire the notifier.
    """

    def __init__(
        self,
        *,
        registry: InMemoryJobRegistry,
        pipeline: EmbeddingPipeline,
        fetcher: FileFetcherPort,
        extractor: TextExtractorPort,
        result_store: ResultStorePort,
        notifier: NotifierPort,
        worker_count: int = 5,
        queue_capacity: int = 100,
        default_chunk_size: Optional[int] = None,
        poll_interval: float = 0.5,
    ) -> None:
        if worker_count <= 0:
            raise ValueError("worker_count must be > 0")
        if queue_capacity <= 0:
            raise ValueError("queue_capacity must be > 0")
        self.registry = registry
        self.pipeline = pipeline
        self.fetcher = fetcher
        self.extractor = extractor
        self.result_store = result_store
        self.notifier = notifier
        self.worker_count = worker_count
        self.default_chunk_size = default_chunk_size
        self._poll = poll_interval
        self._queue: "queue.Queue[str]" = queue.Queue(maxsize=queue_capacity)
        self._stop = threading.Event()
        self._threads: List[threading.Thread] = []

    # ------------------------
    # Lifecycle
    # ------------------------
    @property
    def accepting(self) -> bool:
        """False once stop() has been called; enqueue would raise PoolNotRunning."""
        return not self._stop.is_set()

    def start(self) -> None:
        if self._threads:
            return
        for i in range(self.worker_count):
            t = threading.Thread(target=self._worker_loop, args=(i,), name=f"embed-worker-{i}", daemon=True)
            t.start()
            self._threads.append(t)
        log.info("workers_started count=%d queue_capacity=%d", self.worker_count, self._queue.maxsize)

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop taking new jobs and wait for in-flight ones to finish."""
        self._stop.set()
        for t in self._threads:
            t.join(timeout)
        log.info("workers_stopped count=%d pending=%d", len(self._threads), self._queue.qsize())

    def enqueue(self, job_id: str, timeout: Optional[float] = None) -> None:
        """Push a job id, blocking while the queue is full.

        With ``timeout`` set, gives up with EnqueueTimeout once it expires.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            if self._stop.is_set():
                raise PoolNotRunning("worker pool is stopped")
            wait = self._poll
            if deadline is not None:
                wait = min(wait, max(0.0, deadline - time.monotonic()))
            try:
                self._queue.put(job_id, timeout=wait)
                log.debug("job_enqueued job_id=%s depth=%d", job_id, self._queue.qsize())
                return
            except queue.Full:
                if deadline is not None and time.monotonic() >= deadline:
                    raise EnqueueTimeout(f"job queue full, could not enqueue {job_id}")

    def pending(self) -> int:
        return self._queue.qsize()

    def wait_idle(self) -> None:
        """Block until every enqueued id has been taken and processed."""
        self._queue.join()

    # ------------------------
    # Execution
    # ------------------------
    def _worker_loop(self, worker_id: int) -> None:
        while not self._stop.is_set():
            try:
                job_id = self._queue.get(timeout=self._poll)
            except queue.Empty:
                continue
            try:
                self.process_job(job_id, worker_id=worker_id)
            except Exception:
                log.exception("worker_unhandled_error worker=%d job_id=%s", worker_id, job_id)
            finally:
                self._queue.task_done()

    def process_job(self, job_id: str, *, worker_id: int = 0) -> Optional[Job]:
        job = self.registry.get(job_id)
        if job is None:
            log.warning("job_not_found worker=%d job_id=%s", worker_id, job_id)
            return None
        if job.status != JobStatus.QUEUED:
            log.warning("job_not_queued worker=%d job_id=%s status=%s", worker_id, job_id, job.status.value)
            return None

        log.info("job_started worker=%d job_id=%s files=%d", worker_id, job_id, len(job.files))
        job.status = JobStatus.RUNNING
        job.progress = 0
        self.registry.update(job)

        results: List[EmbedResponse] = []
        total = len(job.files)
        try:
            for done, ref in enumerate(job.files, start=1):
                results.append(self._process_file(ref, worker_id=worker_id, job_id=job_id))
                # 100 is reserved for the completed write below
                if done < total:
                    job.progress = (done * 100) // total
                    self.registry.update(job)

            try:
                location = self.result_store.save(job.job_id, results)
            except Exception as e:
                log.warning("job_storage_failed worker=%d job_id=%s error=%s", worker_id, job_id, e)
                raise _StageFailed(ErrorCode.STORAGE_FAILED, str(e))

            job.status = JobStatus.COMPLETED
            job.progress = 100
            job.result_urls = [location]
            self.registry.update(job)
        except _StageFailed as e:
            return self._fail(job, e.code, str(e))
        except Exception as e:
            log.exception("job_unexpected_error worker=%d job_id=%s", worker_id, job_id)
            return self._fail(job, ErrorCode.EMBEDDING_FAILED, str(e))

        log.info("job_completed worker=%d job_id=%s location=%s", worker_id, job_id, location)
        self._notify(job)
        return job

    def _process_file(self, ref: str, *, worker_id: int, job_id: str) -> EmbedResponse:
        try:
            raw, filename = self.fetcher.fetch(ref)
        except Exception as e:
            log.warning("download_failed worker=%d job_id=%s ref=%s error=%s", worker_id, job_id, ref, e)
            raise _StageFailed(ErrorCode.DOWNLOAD_FAILED, str(e))

        try:
            text = self.extractor.extract(filename, raw)
        except Exception as e:
            log.warning("extraction_failed worker=%d job_id=%s filename=%s error=%s", worker_id, job_id, filename, e)
            raise _StageFailed(ErrorCode.EXTRACTION_FAILED, str(e))

        try:
            results = self.pipeline.embed(
                [EmbedInput(id=filename, text=text)],
                chunk_size=self.default_chunk_size,
                strategy=TruncateStrategy.SPLIT.value,
                normalize=True,
            )
        except Exception as e:
            log.exception("embedding_failed worker=%d job_id=%s filename=%s", worker_id, job_id, filename)
            raise _StageFailed(ErrorCode.EMBEDDING_FAILED, str(e))

        return EmbedResponse(results=results)

    def _fail(self, job: Job, code: ErrorCode, message: str) -> Job:
        stored = self.registry.get(job.job_id)
        if stored is not None:
            # keep the last recorded progress; 100 belongs to completed only
            job.progress = stored.progress
        job.status = JobStatus.FAILED
        job.error = JobError(code=code.value, message=message)
        job.result_urls = None
        try:
            self.registry.update(job)
        except RegistryError:
            log.exception("job_fail_write_rejected job_id=%s code=%s", job.job_id, code.value)
            return job
        log.info("job_failed job_id=%s code=%s", job.job_id, code.value)
        self._notify(job)
        return job

    def _notify(self, job: Job) -> None:
        try:
            self.notifier.notify(job)
        except Exception:
            log.exception("notify_failed job_id=%s status=%s", job.job_id, job.status.value)
