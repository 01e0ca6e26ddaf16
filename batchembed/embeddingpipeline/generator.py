from __future__ import annotations

import logging
from typing import List

from .adapter_mock import MockVectorGenerator
from .adapter_ollama import OllamaVectorGenerator
from .adapter_openai import OpenAIVectorGenerator
from .contracts import VectorGeneratorPort
from .errors import ConfigError, EmbeddingError, ProviderError

logger = logging.getLogger("embeddingpipeline.generator")


class FallbackVectorGenerator:
    """Remote generator guarded by the deterministic mock.

    Any remote failure degrades to the mock vector for that text; the caller
    never sees the error.
    """

    def __init__(self, remote: VectorGeneratorPort, fallback: MockVectorGenerator) -> None:
        self.remote = remote
        self.fallback = fallback
        self.provider_name = remote.provider_name
        self.dimension = fallback.dimension

    def generate(self, text: str) -> List[float]:
        try:
            vector = self.remote.generate(text)
            if len(vector) != self.dimension:
                raise ProviderError(f"expected dimension {self.dimension}, got {len(vector)}")
            return vector
        except EmbeddingError as e:
            logger.warning("remote_embedding_failed provider=%s code=%s error=%s; falling back to mock",
                           self.remote.provider_name, e.code, e)
        except Exception as e:
            logger.warning("remote_embedding_failed provider=%s error=%s; falling back to mock",
                           self.remote.provider_name, e)
        return self.fallback.generate(text)

    def close(self) -> None:
        close = getattr(self.remote, "close", None)
        if close is not None:
            close()


def build_vector_generator(settings) -> VectorGeneratorPort:
    dimension = settings.EMBEDDING_DIMENSION
    mock = MockVectorGenerator(dimension=dimension)
    provider = settings.EMBEDDING_PROVIDER

    if provider == "mock":
        return mock
    if provider == "ollama":
        remote = OllamaVectorGenerator(
            settings.OLLAMA_URL,
            settings.OLLAMA_MODEL,
            dimension,
            timeout=settings.REMOTE_EMBED_TIMEOUT_SECONDS,
        )
        return FallbackVectorGenerator(remote, mock)
    if provider == "openai":
        remote = OpenAIVectorGenerator(
            settings.OPENAI_API_KEY,
            settings.OPENAI_EMBEDDING_MODEL,
            dimension,
            timeout=settings.REMOTE_EMBED_TIMEOUT_SECONDS,
        )
        return FallbackVectorGenerator(remote, mock)
    raise ConfigError(f"Unknown EMBEDDING_PROVIDER={provider}")
