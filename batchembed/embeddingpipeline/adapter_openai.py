from __future__ import annotations

import logging
from typing import Any, List, Optional

from openai import OpenAI

from .errors import ConfigError, EmbeddingError, ProviderError

logger = logging.getLogger("embeddingpipeline.openai")


class OpenAIVectorGenerator:
    provider_name = "openai"

    def __init__(
        self,
        api_key: Optional[str],
        model: str,
        dimension: int,
        *,
        timeout: float = 60.0,
        client: Optional[Any] = None,
    ) -> None:
        if dimension <= 0:
            raise ConfigError(f"embedding dimension must be > 0, got {dimension}")
        self.model = model
        self.dimension = dimension
        self._client = client
        if self._client is None:
            if not api_key:
                logger.warning("OPENAI_API_KEY not set; generator will raise on use.")
            else:
                self._client = OpenAI(api_key=api_key, timeout=timeout)

    def generate(self, text: str) -> List[float]:
        if self._client is None:
            raise ProviderError("OpenAI API key not set.")
        try:
            resp = self._client.embeddings.create(model=self.model, input=[text], dimensions=self.dimension)
            return [float(x) for x in resp.data[0].embedding]
        except EmbeddingError:
            raise
        except Exception as e:
            raise ProviderError(str(e), cause=e)

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
