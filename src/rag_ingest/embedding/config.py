"""Explicit configuration value for embedding clients."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from rag_ingest.config import DASHSCOPE_EMBEDDING_ENDPOINT, Settings, settings
from rag_ingest.embedding.retry import NoRetry, RetryPolicy, retry_policy_for


class EmbeddingConfig(BaseModel):
    """Everything an embedding client needs, fixed at construction.

    ``api_key`` may be left ``None``; the client then falls back to
    ``settings.dashscope_api_key`` and refuses to start if that is empty too.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    api_key: str | None = Field(default=None, repr=False)
    endpoint: str = DASHSCOPE_EMBEDDING_ENDPOINT
    model: str = "text-embedding-v4"
    dimension: int = Field(default=1024, gt=0)
    batch_size: int = Field(default=1, ge=1)
    request_timeout: float = Field(default=60.0, gt=0)
    retry_policy: RetryPolicy = Field(default_factory=NoRetry)

    @classmethod
    def from_settings(cls, source: Settings | None = None) -> EmbeddingConfig:
        source = source or settings
        return cls(
            api_key=source.dashscope_api_key or None,
            endpoint=source.embedding_endpoint,
            model=source.embedding_model,
            dimension=source.embedding_dimension,
            batch_size=source.embedding_batch_size,
            request_timeout=source.embedding_request_timeout,
            retry_policy=retry_policy_for(source.embedding_max_retries),
        )
