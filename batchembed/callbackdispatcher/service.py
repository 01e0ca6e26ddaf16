from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Optional

import httpx

from batchembed.jobregistry.contracts import Job

logger = logging.getLogger("callbackdispatcher.service")


def build_payload(job: Job) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "job_id": job.job_id,
        "status": job.status.value,
        "result_urls": list(job.result_urls) if job.result_urls is not None else None,
    }
    if job.error is not None:
        payload["error"] = job.error.model_dump()
    return payload


class CallbackDispatcher:
    """
    Best-effort webhook for terminal job states.

    notify() hands delivery to a detached daemon thread and returns at once.
    Delivery is a single POST; failures are logged and dropped, never retried.
    """

    def __init__(self, *, timeout: float = 10.0, client: Optional[httpx.Client] = None) -> None:
        self._client = client or httpx.Client(timeout=timeout)

    def notify(self, job: Job) -> Optional[threading.Thread]:
        if not job.callback_url:
            return None
        snapshot = job.model_copy(deep=True)
        t = threading.Thread(
            target=self.deliver,
            args=(snapshot,),
            name=f"callback-{job.job_id[:8]}",
            daemon=True,
        )
        t.start()
        return t

    def deliver(self, job: Job) -> bool:
        if not job.callback_url:
            return False
        try:
            resp = self._client.post(job.callback_url, json=build_payload(job))
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("callback_failed job_id=%s url=%s error=%s", job.job_id, job.callback_url, e)
            return False
        logger.info("callback_sent job_id=%s url=%s status=%d", job.job_id, job.callback_url, resp.status_code)
        return True

    def close(self) -> None:
        self._client.close()
