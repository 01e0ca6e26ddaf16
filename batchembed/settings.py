from __future__ import annotations

from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ProviderName = Literal["mock", "ollama", "openai"]


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    APP_ENV: str = Field(default="development")
    APP_VERSION: str = Field(default="1.0.0")

    # Auth
    API_KEYS: str = Field(default="test-api-key")  # comma separated
    RAPIDAPI_PROXY_SECRET: Optional[str] = None

    # Embedding
    EMBEDDING_PROVIDER: ProviderName = Field(default="mock")
    EMBEDDING_MODEL: str = Field(default="embed-large-512")
    EMBEDDING_DIMENSION: int = Field(default=512)
    OLLAMA_URL: str = Field(default="http://localhost:11434")
    OLLAMA_MODEL: str = Field(default="nomic-embed-text")
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_EMBEDDING_MODEL: str = Field(default="text-embedding-3-small")
    REMOTE_EMBED_TIMEOUT_SECONDS: float = Field(default=60.0)

    # Limits
    MAX_BATCH_SIZE: int = Field(default=100)
    MAX_CHUNK_SIZE: int = Field(default=8000)
    DEFAULT_CHUNK_SIZE: int = Field(default=1000)
    SYNC_FILE_LIMIT_MB: int = Field(default=5)

    # Rate limiting
    RATE_LIMIT_PER_SECOND: int = Field(default=10)
    RATE_LIMIT_BURST: int = Field(default=20)

    # Storage
    STORAGE_PATH: str = Field(default="./storage")

    # Async jobs
    WORKER_COUNT: int = Field(default=5)
    JOB_QUEUE_CAPACITY: int = Field(default=100)
    DOWNLOAD_TIMEOUT_SECONDS: float = Field(default=60.0)
    CALLBACK_TIMEOUT_SECONDS: float = Field(default=10.0)

    @field_validator("WORKER_COUNT", "JOB_QUEUE_CAPACITY", "MAX_CHUNK_SIZE", "DEFAULT_CHUNK_SIZE")
    @classmethod
    def _positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be > 0")
        return v

    def api_key_list(self) -> List[str]:
        return [k.strip() for k in self.API_KEYS.split(",") if k.strip()]


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    return AppSettings()
