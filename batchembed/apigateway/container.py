from __future__ import annotations

import logging
from dataclasses import dataclass

from batchembed.callbackdispatcher import CallbackDispatcher
from batchembed.embeddingpipeline import EmbeddingPipeline, VectorGeneratorPort, build_vector_generator
from batchembed.fileacquisition import FileFetcher
from batchembed.jobregistry import InMemoryJobRegistry
from batchembed.resultstore import LocalResultStore
from batchembed.settings import AppSettings
from batchembed.textextraction import TextExtractor
from batchembed.workerpool import WorkerPool

log = logging.getLogger("apigateway.container")


@dataclass
class ServiceContainer:
    settings: AppSettings
    registry: InMemoryJobRegistry
    generator: VectorGeneratorPort
    pipeline: EmbeddingPipeline
    extractor: TextExtractor
    fetcher: FileFetcher
    notifier: CallbackDispatcher
    result_store: LocalResultStore
    pool: WorkerPool

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "ServiceContainer":
        registry = InMemoryJobRegistry()
        generator = build_vector_generator(settings)
        pipeline = EmbeddingPipeline(
            generator=generator,
            default_chunk_size=settings.DEFAULT_CHUNK_SIZE,
            max_chunk_size=settings.MAX_CHUNK_SIZE,
        )
        extractor = TextExtractor()
        fetcher = FileFetcher(timeout=settings.DOWNLOAD_TIMEOUT_SECONDS)
        notifier = CallbackDispatcher(timeout=settings.CALLBACK_TIMEOUT_SECONDS)
        result_store = LocalResultStore(settings.STORAGE_PATH)
        pool = WorkerPool(
            registry=registry,
            pipeline=pipeline,
            fetcher=fetcher,
            extractor=extractor,
            result_store=result_store,
            notifier=notifier,
            worker_count=settings.WORKER_COUNT,
            queue_capacity=settings.JOB_QUEUE_CAPACITY,
            default_chunk_size=settings.DEFAULT_CHUNK_SIZE,
        )
        log.info(
            "container_built provider=%s dimension=%d workers=%d",
            settings.EMBEDDING_PROVIDER, settings.EMBEDDING_DIMENSION, settings.WORKER_COUNT,
        )
        return cls(
            settings=settings,
            registry=registry,
            generator=generator,
            pipeline=pipeline,
            extractor=extractor,
            fetcher=fetcher,
            notifier=notifier,
            result_store=result_store,
            pool=pool,
        )

    def close(self) -> None:
        """Release the outbound HTTP clients. Call after the pool has stopped."""
        self.fetcher.close()
        self.notifier.close()
        close = getattr(self.generator, "close", None)
        if close is not None:
            close()
        log.info("container_closed")
