"""
Embedding — text → fixed-dimension vectors via an external service.

Public surface
--------------
- :class:`EmbeddingProvider` — vendor-neutral capability interface.
- :class:`DashScopeEmbeddings` — DashScope HTTP implementation.
- :class:`EmbeddingConfig` — explicit client configuration.
- :class:`RetryPolicy`, :class:`NoRetry`, :class:`ExponentialBackoff` — retry plug-ins.
"""

from rag_ingest.embedding.base import EmbeddingProvider
from rag_ingest.embedding.config import EmbeddingConfig
from rag_ingest.embedding.dashscope import DashScopeEmbeddings
from rag_ingest.embedding.retry import ExponentialBackoff, NoRetry, RetryPolicy, retry_policy_for

__all__ = [
    "DashScopeEmbeddings",
    "EmbeddingConfig",
    "EmbeddingProvider",
    "ExponentialBackoff",
    "NoRetry",
    "RetryPolicy",
    "retry_policy_for",
]
