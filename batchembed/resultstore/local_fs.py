from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, List

from pydantic import BaseModel

from .errors import ResultNotFound, StorageError

logger = logging.getLogger("resultstore.local_fs")

RESULTS_ROUTE = "/v1/results"


def result_filename(job_id: str) -> str:
    return f"{job_id}_results.json"


class LocalResultStore:
    """Writes one JSON document per job under ``root``."""

    def __init__(self, root_dir: str, *, route_prefix: str = RESULTS_ROUTE) -> None:
        self.root = Path(root_dir).resolve()
        self.route_prefix = route_prefix.rstrip("/")

    def save(self, job_id: str, results: List[Any]) -> str:
        payload = [r.model_dump(exclude_none=True) if isinstance(r, BaseModel) else r for r in results]
        filename = result_filename(job_id)
        target = self.root / filename
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.root, prefix=f".{job_id}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(payload, f, indent=2)
                os.replace(tmp, target)
            except BaseException:
                Path(tmp).unlink(missing_ok=True)
                raise
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"failed to save results for job {job_id}: {e}")

        logger.info("results_saved job_id=%s path=%s", job_id, target)
        return f"{self.route_prefix}/{filename}"

    def resolve(self, filename: str) -> Path:
        # basic traversal guard: only the final path component is honoured
        name = Path(filename.replace("\\", "/")).name
        if not name or name.startswith("."):
            raise ResultNotFound(filename)
        path = self.root / name
        if not path.is_file():
            raise ResultNotFound(filename)
        return path
