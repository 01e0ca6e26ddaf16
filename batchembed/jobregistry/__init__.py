from .contracts import ErrorCode, Job, JobError, JobPriority, JobStatus
from .errors import InvalidTransition, JobNotFound, RegistryError
from .repository import InMemoryJobRegistry

__all__ = [
    "ErrorCode",
    "Job",
    "JobError",
    "JobPriority",
    "JobStatus",
    "InvalidTransition",
    "JobNotFound",
    "RegistryError",
    "InMemoryJobRegistry",
]
