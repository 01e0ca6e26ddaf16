from __future__ import annotations

from typing import List

from .contracts import TextChunk, TruncateStrategy


class CharChunker:
    """Splits text on code-point boundaries.

    Python strings index by code point, so offsets never land inside a
    multi-byte character. ``chunk_size`` is validated by callers.
    """

    def chunk(self, doc_id: str, text: str, *, chunk_size: int, strategy: TruncateStrategy) -> List[TextChunk]:
        length = len(text)

        if strategy == TruncateStrategy.TRUNCATE:
            end = min(chunk_size, length)
            return [TextChunk(chunk_id=f"{doc_id}_0", text=text[:end], start=0, end=end)]

        chunks: List[TextChunk] = []
        for idx, start in enumerate(range(0, length, chunk_size)):
            end = min(start + chunk_size, length)
            chunks.append(TextChunk(chunk_id=f"{doc_id}_{idx}", text=text[start:end], start=start, end=end))
        return chunks
