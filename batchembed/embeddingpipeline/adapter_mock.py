from __future__ import annotations

import logging
import random
from typing import List

from .errors import ConfigError

logger = logging.getLogger("embeddingpipeline.mock")

_MASK64 = (1 << 64) - 1


def text_seed(text: str) -> int:
    """Stable 64-bit polynomial hash over the text's code points (wraps like int64)."""
    seed = 0
    for ch in text:
        seed = (seed * 31 + ord(ch)) & _MASK64
    if seed >= 1 << 63:
        seed -= 1 << 64
    return seed


class MockVectorGenerator:
    """Deterministic, zero-dependency generator for tests and local dev."""

    provider_name = "mock"

    def __init__(self, dimension: int = 512) -> None:
        if dimension <= 0:
            raise ConfigError(f"embedding dimension must be > 0, got {dimension}")
        self.dimension = dimension

    def generate(self, text: str) -> List[float]:
        rng = random.Random(text_seed(text))
        return [rng.uniform(-1.0, 1.0) for _ in range(self.dimension)]
