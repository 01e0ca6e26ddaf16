from __future__ import annotations

import logging
from typing import List, Optional

import httpx

from .errors import ConfigError, ProviderError

logger = logging.getLogger("embeddingpipeline.ollama")


class OllamaVectorGenerator:
    provider_name = "ollama"

    def __init__(
        self,
        base_url: str,
        model: str,
        dimension: int,
        *,
        timeout: float = 60.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        if dimension <= 0:
            raise ConfigError(f"embedding dimension must be > 0, got {dimension}")
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.dimension = dimension
        self._client = client or httpx.Client(timeout=timeout)

    def generate(self, text: str) -> List[float]:
        url = f"{self.base_url}/api/embeddings"
        try:
            resp = self._client.post(url, json={"model": self.model, "prompt": text})
        except httpx.HTTPError as e:
            raise ProviderError(f"failed to call Ollama: {e}", cause=e)

        if resp.status_code != 200:
            raise ProviderError(f"Ollama returned status {resp.status_code}: {resp.text}")

        try:
            vector = resp.json()["embedding"]
        except (ValueError, KeyError, TypeError) as e:
            raise ProviderError(f"failed to decode Ollama response: {e}", cause=e)
        if not isinstance(vector, list) or not vector:
            raise ProviderError("Ollama response carried no embedding")
        return [float(x) for x in vector]

    def close(self) -> None:
        self._client.close()
