from __future__ import annotations


class WorkerPoolError(Exception):
    """Base error for the worker pool."""


class PoolNotRunning(WorkerPoolError):
    """Raised when work is submitted to a pool that is stopped or was never started."""


class EnqueueTimeout(WorkerPoolError):
    """Raised when a bounded enqueue wait expires with the queue still full."""
