"""
Ingestion — turn uploaded files into text and embedding vectors.

Extraction and embedding are tied together per document; each file ends in
a success, a partial failure (text recovered, vectors missing) or a
failure, and batches never abort on a single bad file.
"""

from rag_ingest.ingestion.chunker import chunk_text
from rag_ingest.ingestion.models import (
    IngestionFailure,
    IngestionOutcome,
    IngestionPartialFailure,
    IngestionReport,
    IngestionSuccess,
)
from rag_ingest.ingestion.pipeline import IngestionPipeline

__all__ = [
    "IngestionFailure",
    "IngestionOutcome",
    "IngestionPartialFailure",
    "IngestionPipeline",
    "IngestionReport",
    "IngestionSuccess",
    "chunk_text",
]
