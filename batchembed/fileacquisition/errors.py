from __future__ import annotations

from typing import Optional


class AcquisitionError(Exception):
    """Base error for fetching job input files."""


class SourceNotFound(AcquisitionError):
    """The reference is neither an existing local file nor a fetchable URL."""


class DownloadFailed(AcquisitionError):
    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
