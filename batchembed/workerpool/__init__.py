"""
Worker pool component.
Exports the WorkerPool and the ports it consumes.
"""
from .errors import EnqueueTimeout, PoolNotRunning, WorkerPoolError
from .ports import FileFetcherPort, NotifierPort, ResultStorePort, TextExtractorPort
from .service import WorkerPool

__all__ = [
    "EnqueueTimeout",
    "PoolNotRunning",
    "WorkerPoolError",
    "FileFetcherPort",
    "NotifierPort",
    "ResultStorePort",
    "TextExtractorPort",
    "WorkerPool",
]
