"""Records handed to the persistence layer."""

from __future__ import annotations

import hashlib
import json
from typing import Any, Sequence

from pydantic import BaseModel, Field

from rag_ingest.extraction.models import ExtractedDocument
from rag_ingest.store.metadata import FilenameMetadata, MetadataEnricher, MetadataValue


class StoredChunk(BaseModel):
    """One row of the ``documents`` collection.

    Attributes
    ----------
    id:
        Deterministic ``<source-hash>_<chunk_index>``, so re-ingesting a
        source overwrites its rows instead of duplicating them.
    content:
        Chunk text; substring-searchable by the store.
    metadata:
        Flat scalar metadata (``source``, ``page_count``, ``chunk_index``,
        ``chunk_count``, ``info_*`` keys and any filename-derived keys such
        as ``year``, ``department`` and ``keywords``).
    embedding:
        Vector of the configured dimension.
    """

    id: str
    content: str
    metadata: dict[str, MetadataValue] = Field(default_factory=dict)
    embedding: list[float]

    @property
    def embedding_json(self) -> str:
        return serialize_embedding(self.embedding)


def source_id(source: str) -> str:
    return hashlib.sha256(source.encode()).hexdigest()[:16]


def build_chunk_records(
    source: str,
    document: ExtractedDocument,
    chunks: Sequence[str],
    vectors: Sequence[Sequence[float]],
    *,
    enricher: MetadataEnricher | None = None,
) -> list[StoredChunk]:
    """Pair every chunk with its vector and the document-level metadata.

    *enricher* maps the source name to extra metadata and defaults to
    :class:`FilenameMetadata`. Its keys never override the built-in ones.
    """
    if len(chunks) != len(vectors):
        raise ValueError(f"Got {len(chunks)} chunks but {len(vectors)} vectors for {source}")

    enrich = enricher or FilenameMetadata()
    base: dict[str, MetadataValue] = {
        **enrich(source),
        "source": source,
        "page_count": document.page_count or 1,
        "chunk_count": len(chunks),
    }
    for key, value in (document.info or {}).items():
        if isinstance(value, (str, int, float, bool)):
            base[f"info_{key}"] = value

    doc_id = source_id(source)
    return [
        StoredChunk(
            id=f"{doc_id}_{idx}",
            content=chunk,
            metadata={**base, "chunk_index": idx},
            embedding=list(vector),
        )
        for idx, (chunk, vector) in enumerate(zip(chunks, vectors))
    ]


def serialize_embedding(vector: Sequence[float]) -> str:
    """Encode a vector as a JSON array of floats."""
    return json.dumps([float(x) for x in vector])


def parse_embedding(value: str | Sequence[Any]) -> list[float]:
    """Decode a vector read back from a store.

    Accepts either the JSON text written by :func:`serialize_embedding` or an
    already-decoded sequence.
    """
    decoded = json.loads(value) if isinstance(value, str) else value
    if not isinstance(decoded, (list, tuple)):
        raise ValueError(f"Embedding must be a JSON array, got {type(decoded).__name__}")
    return [float(x) for x in decoded]
