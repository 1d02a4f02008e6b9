"""
Store — the persistence boundary for embedded chunks.

Public surface
--------------
- :class:`DocumentStore` — abstract backend.
- :class:`ChromaDocumentStore` — default Chroma backend.
- :class:`StoredChunk`, :func:`build_chunk_records` — records handed to a store.
- :class:`FilenameMetadata` — default filename-derived metadata enricher.
- :func:`serialize_embedding`, :func:`parse_embedding` — JSON vector codec.
"""

from rag_ingest.store.base import DocumentStore
from rag_ingest.store.metadata import FilenameMetadata, MetadataEnricher
from rag_ingest.store.models import (
    StoredChunk,
    build_chunk_records,
    parse_embedding,
    serialize_embedding,
    source_id,
)

__all__ = [
    "ChromaDocumentStore",
    "DocumentStore",
    "FilenameMetadata",
    "MetadataEnricher",
    "StoredChunk",
    "build_chunk_records",
    "parse_embedding",
    "serialize_embedding",
    "source_id",
]


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import ChromaDocumentStore to avoid pulling in chromadb at import time."""
    if name == "ChromaDocumentStore":
        from rag_ingest.store.chroma_store import ChromaDocumentStore

        return ChromaDocumentStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
