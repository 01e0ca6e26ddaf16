from __future__ import annotations

from typing import Any, List, Optional, Protocol, Tuple

from batchembed.jobregistry.contracts import Job


class FileFetcherPort(Protocol):
    def fetch(self, ref: str) -> Tuple[bytes, str]:
        """Return (raw bytes, filename). Local paths take priority over URLs."""
        ...


class TextExtractorPort(Protocol):
    def extract(self, filename: str, raw: bytes) -> str:
        ...


class ResultStorePort(Protocol):
    def save(self, job_id: str, results: List[Any]) -> str:
        """Persist one job's results and return a location reference."""
        ...


class NotifierPort(Protocol):
    def notify(self, job: Job) -> Optional[Any]:
        ...
