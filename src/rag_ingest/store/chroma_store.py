"""Chroma implementation of the document-store boundary."""

from __future__ import annotations

import logging
from typing import Any

import chromadb

from rag_ingest.config import settings
from rag_ingest.store.base import DocumentStore
from rag_ingest.store.models import StoredChunk

logger = logging.getLogger(__name__)


class ChromaDocumentStore(DocumentStore):
    """Chroma-backed store for precomputed embeddings.

    Parameters
    ----------
    collection_name:
        Name of the Chroma collection.
    client:
        Ready Chroma client (e.g. ``chromadb.EphemeralClient()`` in tests).
        When omitted an ``HttpClient`` is created from *host* / *port*.
    host:
        Chroma server hostname.
    port:
        Chroma server port.
    distance_metric:
        ``cosine`` | ``l2`` | ``ip``.
    """

    def __init__(
        self,
        collection_name: str = settings.chroma_collection,
        *,
        client: Any = None,
        host: str = settings.chroma_host,
        port: int = settings.chroma_port,
        distance_metric: str = "cosine",
    ) -> None:
        super().__init__(collection_name)
        self._client = client if client is not None else chromadb.HttpClient(host=host, port=port)
        self._collection = self._client.get_or_create_collection(
            name=collection_name,
            metadata={"hnsw:space": distance_metric},
        )

    # -- DocumentStore overrides ----------------------------------------------

    def add_chunks(self, records: list[StoredChunk]) -> list[str]:
        if not records:
            return []
        ids = [r.id for r in records]
        self._collection.upsert(
            ids=ids,
            embeddings=[r.embedding for r in records],
            documents=[r.content for r in records],
            metadatas=[r.metadata for r in records],
        )
        self._drop_stale_chunks(records)
        logger.info("Upserted %d chunks into collection '%s'", len(ids), self.collection_name)
        return ids

    def has_source(self, source: str) -> bool:
        found = self._collection.get(where={"source": source}, limit=1)
        return bool(found.get("ids"))

    def health_check(self) -> bool:
        try:
            self._client.heartbeat()
            return True
        except Exception:
            logger.warning("Chroma health-check failed", exc_info=True)
            return False

    def delete(self, ids: list[str]) -> None:
        self._collection.delete(ids=ids)

    # -- internals ------------------------------------------------------------

    def _drop_stale_chunks(self, records: list[StoredChunk]) -> None:
        """Remove rows left over from an earlier, longer version of a source."""
        counts = {r.metadata["source"]: r.metadata["chunk_count"] for r in records}
        for source, count in counts.items():
            self._collection.delete(
                where={"$and": [{"source": source}, {"chunk_index": {"$gte": count}}]}
            )
