"""Shared configuration loaded from environment / .env file."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings

DASHSCOPE_EMBEDDING_ENDPOINT = (
    "https://dashscope.aliyuncs.com/api/v1/services/embeddings/text-embedding/text-embedding"
)


class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file."""

    # Embedding service
    dashscope_api_key: str = Field(default="", description="DashScope API key used by the embedding client")
    embedding_endpoint: str = Field(
        default=DASHSCOPE_EMBEDDING_ENDPOINT,
        description="POST endpoint of the text-embedding service",
    )
    embedding_model: str = "text-embedding-v4"
    embedding_dimension: int = 1024
    embedding_batch_size: int = Field(default=1, description="Texts embedded concurrently per batch")
    embedding_request_timeout: float = Field(default=60.0, description="Per-call HTTP timeout in seconds")
    embedding_max_retries: int = Field(default=0, description="Retries on transient failures; 0 disables retrying")

    # Chunking (only used when the caller opts into the bundled splitter)
    chunk_size: int = 1000
    chunk_overlap: int = 200

    # Filename metadata, e.g. DEPARTMENT_RULES='{"教务处": ["教务处"]}'
    department_rules: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Department name -> file-name substrings that identify it",
    )
    default_department: str = ""

    # Vector store
    chroma_host: str = "localhost"
    chroma_port: int = 8000
    chroma_collection: str = "documents"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


# Module-level instance shared by the extractor, embedder and store.
settings = Settings()
