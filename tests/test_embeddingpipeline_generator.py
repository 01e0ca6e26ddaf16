import json
import logging

import httpx
import pytest

from batchembed.embeddingpipeline.adapter_mock import MockVectorGenerator, text_seed
from batchembed.embeddingpipeline.adapter_ollama import OllamaVectorGenerator
from batchembed.embeddingpipeline.errors import ConfigError, ProviderError
from batchembed.embeddingpipeline.generator import FallbackVectorGenerator, build_vector_generator
from batchembed.settings import AppSettings


def test_mock_vectors_are_deterministic_and_bounded():
    gen = MockVectorGenerator(dimension=64)
    a = gen.generate("hello")
    assert a == MockVectorGenerator(dimension=64).generate("hello")
    assert len(a) == 64
    assert all(-1.0 <= x <= 1.0 for x in a)


def test_text_seed_wraps_to_signed_64_bits():
    seed = text_seed("x" * 500)
    assert -(1 << 63) <= seed < (1 << 63)
    assert text_seed("") == 0


def test_mock_rejects_bad_dimension():
    with pytest.raises(ConfigError):
        MockVectorGenerator(dimension=0)


def _ollama(handler, dim=3):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return OllamaVectorGenerator("http://ollama.test", "nomic", dim, client=client)


def test_ollama_posts_prompt_and_reads_embedding():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["body"] = request.read()
        return httpx.Response(200, json={"embedding": [1, 2, 3]})

    vec = _ollama(handler).generate("hi there")
    assert vec == [1.0, 2.0, 3.0]
    assert seen["url"] == "http://ollama.test/api/embeddings"
    assert json.loads(seen["body"]) == {"model": "nomic", "prompt": "hi there"}


def test_ollama_non_200_raises_provider_error():
    gen = _ollama(lambda req: httpx.Response(500, text="boom"))
    with pytest.raises(ProviderError):
        gen.generate("x")


def test_fallback_uses_mock_on_remote_failure(caplog):
    mock = MockVectorGenerator(dimension=3)
    gen = FallbackVectorGenerator(_ollama(lambda req: httpx.Response(503)), mock)
    with caplog.at_level(logging.WARNING, logger="embeddingpipeline.generator"):
        vec = gen.generate("fallback text")
    assert vec == mock.generate("fallback text")
    assert any("remote_embedding_failed" in r.getMessage() for r in caplog.records)


def test_fallback_on_transport_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    mock = MockVectorGenerator(dimension=3)
    gen = FallbackVectorGenerator(_ollama(handler), mock)
    assert gen.generate("abc") == mock.generate("abc")


def test_fallback_on_dimension_mismatch():
    mock = MockVectorGenerator(dimension=4)
    remote = _ollama(lambda req: httpx.Response(200, json={"embedding": [0.1, 0.2]}), dim=4)
    assert FallbackVectorGenerator(remote, mock).generate("t") == mock.generate("t")


def test_fallback_passes_remote_vector_through():
    mock = MockVectorGenerator(dimension=3)
    remote = _ollama(lambda req: httpx.Response(200, json={"embedding": [0.5, 0.5, 0.5]}))
    assert FallbackVectorGenerator(remote, mock).generate("t") == [0.5, 0.5, 0.5]


def test_build_vector_generator_selects_provider():
    mock = build_vector_generator(AppSettings(_env_file=None, EMBEDDING_PROVIDER="mock", EMBEDDING_DIMENSION=8))
    assert isinstance(mock, MockVectorGenerator)
    assert mock.dimension == 8

    ollama = build_vector_generator(AppSettings(_env_file=None, EMBEDDING_PROVIDER="ollama", EMBEDDING_DIMENSION=8))
    assert isinstance(ollama, FallbackVectorGenerator)
    assert ollama.provider_name == "ollama"


def test_openai_without_key_falls_back():
    gen = build_vector_generator(
        AppSettings(_env_file=None, EMBEDDING_PROVIDER="openai", EMBEDDING_DIMENSION=8, OPENAI_API_KEY=None)
    )
    assert gen.generate("q") == MockVectorGenerator(dimension=8).generate("q")
