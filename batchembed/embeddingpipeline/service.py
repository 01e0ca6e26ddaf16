from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from .chunker import CharChunker
from .contracts import (
    Chunk,
    EmbedInput,
    EmbedRequest,
    EmbedResponse,
    EmbedResult,
    TruncateStrategy,
    VectorGeneratorPort,
    l2_normalize,
    time_it,
    truncate_snippet,
)

logger = logging.getLogger("embeddingpipeline.service")


class EmbeddingPipeline:
    """
    Orchestrates: resolve options -> (chunk) -> generate vectors -> normalize.
    Output order matches input order.
    """

    def __init__(
        self,
        *,
        generator: VectorGeneratorPort,
        default_chunk_size: int = 1000,
        max_chunk_size: int = 8000,
        chunker: Optional[CharChunker] = None,
    ) -> None:
        self.generator = generator
        self.default_chunk_size = default_chunk_size
        self.max_chunk_size = max_chunk_size
        self.chunker = chunker or CharChunker()

    # ------------------------
    # API
    # ------------------------
    def resolve_chunk_size(self, chunk_size: Optional[int]) -> int:
        size = chunk_size if chunk_size and chunk_size > 0 else self.default_chunk_size
        return min(size, self.max_chunk_size)

    @staticmethod
    def resolve_strategy(strategy: Optional[str]) -> TruncateStrategy:
        try:
            return TruncateStrategy(strategy)
        except ValueError:
            return TruncateStrategy.TRUNCATE

    @time_it
    def embed(
        self,
        inputs: Iterable[EmbedInput],
        *,
        chunk_size: Optional[int] = None,
        strategy: Optional[str] = None,
        normalize: bool = False,
    ) -> List[EmbedResult]:
        size = self.resolve_chunk_size(chunk_size)
        strat = self.resolve_strategy(strategy)

        results: List[EmbedResult] = []
        for item in inputs:
            if len(item.text) <= size:
                results.append(EmbedResult(id=item.id, embeddings=self.vector(item.text, normalize)))
                continue

            chunks = [
                Chunk(
                    chunk_id=c.chunk_id,
                    start=c.start,
                    end=c.end,
                    text_snippet=truncate_snippet(c.text),
                    embedding=self.vector(c.text, normalize),
                )
                for c in self.chunker.chunk(item.id, item.text, chunk_size=size, strategy=strat)
            ]
            results.append(EmbedResult(id=item.id, chunks=chunks))

        logger.info(
            "embed_completed inputs=%d chunk_size=%d strategy=%s normalize=%s provider=%s",
            len(results), size, strat.value, normalize, self.generator.provider_name,
        )
        return results

    def embed_request(self, req: EmbedRequest) -> EmbedResponse:
        results = self.embed(
            req.inputs,
            chunk_size=req.chunk_size,
            strategy=req.truncate_strategy,
            normalize=req.normalize,
        )
        return EmbedResponse(results=results)

    def vector(self, text: str, normalize: bool) -> List[float]:
        vec = self.generator.generate(text)
        return l2_normalize(vec) if normalize else vec
