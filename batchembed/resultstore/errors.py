from __future__ import annotations


class StorageError(Exception):
    """Base error for result persistence."""


class ResultNotFound(StorageError):
    pass
