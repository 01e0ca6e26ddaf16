from __future__ import annotations


class ExtractionError(Exception):
    """Base error for text extraction."""


class UnsupportedFileType(ExtractionError):
    pass


class ExtractionFailed(ExtractionError):
    pass
