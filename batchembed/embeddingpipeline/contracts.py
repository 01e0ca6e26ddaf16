from __future__ import annotations

import enum
import logging
import math
import time
from dataclasses import dataclass
from typing import List, Optional, Protocol, runtime_checkable

from pydantic import BaseModel, Field, model_validator

logger = logging.getLogger("embeddingpipeline.contracts")

SNIPPET_MAX_CHARS = 200
SNIPPET_MARKER = "..."


class TruncateStrategy(str, enum.Enum):
    TRUNCATE = "truncate"
    SPLIT = "split"


class EmbedInput(BaseModel):
    id: str = Field(..., min_length=1)
    text: str = Field(..., min_length=1)


class Chunk(BaseModel):
    chunk_id: str
    start: int
    end: int
    text_snippet: str
    embedding: List[float]


class EmbedResult(BaseModel):
    """One result per input: a whole-document vector or a list of chunks, never both."""
    id: str
    embeddings: Optional[List[float]] = None
    chunks: Optional[List[Chunk]] = None

    @model_validator(mode="after")
    def _exactly_one(self) -> "EmbedResult":
        if (self.embeddings is None) == (self.chunks is None):
            raise ValueError("exactly one of 'embeddings' or 'chunks' must be set")
        return self


class EmbedRequest(BaseModel):
    model: str = Field(..., min_length=1)
    inputs: List[EmbedInput] = Field(..., min_length=1)
    truncate_strategy: Optional[str] = None
    chunk_size: Optional[int] = None
    normalize: bool = False


class EmbedResponse(BaseModel):
    results: List[EmbedResult]


@dataclass
class TextChunk:
    chunk_id: str
    text: str
    start: int
    end: int


@runtime_checkable
class VectorGeneratorPort(Protocol):
    provider_name: str
    dimension: int

    def generate(self, text: str) -> List[float]: ...


def l2_normalize(vec: List[float]) -> List[float]:
    norm = math.sqrt(sum(x * x for x in vec))
    if norm == 0:
        return list(vec)
    return [x / norm for x in vec]


def truncate_snippet(text: str, max_chars: int = SNIPPET_MAX_CHARS) -> str:
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + SNIPPET_MARKER


def time_it(func):
    """Simple timing decorator for observability."""
    def wrapper(*args, **kwargs):
        t0 = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            dt_ms = round((time.perf_counter() - t0) * 1000, 3)
            logger.debug("%s completed in %sms", func.__name__, dt_ms)
    return wrapper
