"""Abstract base class for document-store backends.

The ingestion core only hands finished records across this boundary;
similarity search and durable identity belong to the store. Adding a
backend (pgvector, Qdrant, …) means subclassing :class:`DocumentStore`
and implementing the three abstract methods.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from rag_ingest.store.models import StoredChunk


class DocumentStore(ABC):
    """Backend-agnostic sink for embedded chunks.

    Parameters
    ----------
    collection_name:
        Logical name of the collection / table / index.
    """

    def __init__(self, collection_name: str) -> None:
        self.collection_name = collection_name

    # -- required overrides ---------------------------------------------------

    @abstractmethod
    def add_chunks(self, records: list[StoredChunk]) -> list[str]:
        """Insert or overwrite *records* and return their ids.

        Rows of the same source beyond the new ``chunk_count`` must not
        survive the call.
        """
        ...

    @abstractmethod
    def has_source(self, source: str) -> bool:
        """Return ``True`` when chunks for *source* are already stored."""
        ...

    @abstractmethod
    def health_check(self) -> bool:
        """Return ``True`` when the backend is reachable and ready."""
        ...

    # -- optional overrides ---------------------------------------------------

    def delete(self, ids: list[str]) -> None:
        """Delete chunks by their IDs.  Optional — raises by default."""
        raise NotImplementedError(f"{type(self).__name__} does not support delete")
