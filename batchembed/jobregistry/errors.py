from __future__ import annotations


class RegistryError(Exception):
    """Base error for the job registry."""


class JobNotFound(RegistryError):
    """Raised when an update targets an id the registry never created."""


class InvalidTransition(RegistryError):
    """Raised when an update would move a job backwards or out of a terminal state."""
