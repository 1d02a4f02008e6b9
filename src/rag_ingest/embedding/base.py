"""Capability interface shared by every embedding provider.

A provider only has to implement :meth:`EmbeddingProvider.embed_query` for
its own wire format. Batching, in-batch concurrency, result ordering,
dimension checks and cancellation live here, so the ingestion pipeline
never depends on one vendor.

The class extends LangChain's :class:`~langchain_core.embeddings.Embeddings`,
so providers also plug into LangChain vector stores and inherit the async
``aembed_query`` / ``aembed_documents`` wrappers.
"""

from __future__ import annotations

import logging
import threading
from abc import abstractmethod
from concurrent.futures import ThreadPoolExecutor
from typing import Sequence

from langchain_core.embeddings import Embeddings

from rag_ingest.errors import EmbeddingCancelledError, EmbeddingResponseError

logger = logging.getLogger(__name__)


class EmbeddingProvider(Embeddings):
    """Backend-agnostic embedding interface.

    Parameters
    ----------
    dimension:
        Length every returned vector must have.
    batch_size:
        Number of texts embedded concurrently; batches run one after another,
        so this also bounds outstanding requests to the provider.
    """

    def __init__(self, *, dimension: int, batch_size: int = 1) -> None:
        if dimension < 1:
            raise ValueError(f"dimension must be >= 1, got {dimension}")
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        self.dimension = dimension
        self.batch_size = batch_size

    # -- required overrides ---------------------------------------------------

    @abstractmethod
    def embed_query(self, text: str) -> list[float]:
        """Return the embedding of a single *text*."""
        ...

    # -- shared behaviour -----------------------------------------------------

    def embed_documents(
        self,
        texts: Sequence[str],
        *,
        cancel_event: threading.Event | None = None,
    ) -> list[list[float]]:
        """Embed *texts*, returning one vector per text in input order.

        Parameters
        ----------
        texts:
            Texts to embed. An empty sequence returns ``[]`` without any call.
        cancel_event:
            Checked before every batch; once set, remaining batches are
            abandoned with :class:`EmbeddingCancelledError`.
        """
        texts = list(texts)
        vectors: list[list[float]] = []
        for start in range(0, len(texts), self.batch_size):
            if cancel_event is not None and cancel_event.is_set():
                raise EmbeddingCancelledError(f"Embedding cancelled after {len(vectors)} of {len(texts)} texts")
            batch = texts[start : start + self.batch_size]
            vectors.extend(self.validate_vector(v) for v in self._embed_batch(batch))
            logger.debug("embedded %d / %d", len(vectors), len(texts))
        return vectors

    def validate_vector(self, vector: list[float]) -> list[float]:
        if len(vector) != self.dimension:
            raise EmbeddingResponseError(
                f"Expected embedding of dimension {self.dimension}, got {len(vector)}"
            )
        return vector

    # -- internals ------------------------------------------------------------

    def _embed_batch(self, batch: list[str]) -> list[list[float]]:
        if len(batch) == 1:
            return [self.embed_query(batch[0])]
        # map() yields in submission order, not completion order.
        with ThreadPoolExecutor(max_workers=len(batch)) as pool:
            return list(pool.map(self.embed_query, batch))
