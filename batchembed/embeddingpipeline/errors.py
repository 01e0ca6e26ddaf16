from __future__ import annotations

from typing import Optional


class EmbeddingError(Exception):
    """Typed error for the embedding pipeline and its vector generators."""
    def __init__(self, code: str, message: str, *, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.code = code
        self.cause = cause


class ConfigError(EmbeddingError):
    """Bad generator configuration (dimension, provider, credentials)."""
    def __init__(self, message: str, *, cause: Optional[BaseException] = None) -> None:
        super().__init__("CONFIG_ERROR", message, cause=cause)


class ProviderError(EmbeddingError):
    """A remote embedding backend failed or returned an unusable payload."""
    def __init__(self, message: str, *, cause: Optional[BaseException] = None) -> None:
        super().__init__("PROVIDER_ERROR", message, cause=cause)
