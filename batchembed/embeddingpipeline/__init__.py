# Re-export common entrypoints
from .contracts import (
    Chunk,
    EmbedInput,
    EmbedRequest,
    EmbedResponse,
    EmbedResult,
    TruncateStrategy,
    VectorGeneratorPort,
    l2_normalize,
)
from .errors import EmbeddingError
from .chunker import CharChunker
from .adapter_mock import MockVectorGenerator
from .generator import FallbackVectorGenerator, build_vector_generator
from .service import EmbeddingPipeline
