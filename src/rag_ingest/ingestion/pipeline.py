"""Ingestion pipeline — extraction → (chunking) → embedding, per document.

This module is the **primary public interface** of the package.

Usage::

    from rag_ingest.ingestion import IngestionPipeline

    pipeline = IngestionPipeline()
    outcome = pipeline.ingest("/tmp/upload-91c2", "Fees 2024.xlsx")
    if outcome.status == "success":
        print(len(outcome.vectors))

    report = pipeline.ingest_many(["a.pdf", "b.docx", ("tmp-77", "c.md")])
    print(report.summary())

Every document ends in exactly one of three outcomes, and a failure on one
document never stops the ones after it.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable, Iterable, Union

from rag_ingest.embedding.base import EmbeddingProvider
from rag_ingest.errors import EmbeddingError, ExtractionIOError
from rag_ingest.extraction.extractor import FormatExtractor
from rag_ingest.ingestion.models import (
    IngestionFailure,
    IngestionOutcome,
    IngestionPartialFailure,
    IngestionReport,
    IngestionSuccess,
    error_fields,
)
from rag_ingest.store.base import DocumentStore
from rag_ingest.store.metadata import MetadataEnricher
from rag_ingest.store.models import build_chunk_records

logger = logging.getLogger(__name__)

Splitter = Callable[[str], list[str]]
FileItem = Union[str, Path, tuple[Union[str, Path], str]]


def _whole_text(text: str) -> list[str]:
    return [text]


class IngestionPipeline:
    """Orchestrate extraction and embedding with per-document error containment.

    Parameters
    ----------
    extractor:
        Format extractor. Defaults to :class:`FormatExtractor`.
    embedder:
        Embedding provider. When *None*, a
        :class:`~rag_ingest.embedding.dashscope.DashScopeEmbeddings` is built
        from the global settings (and fails fast without an API key).
    splitter:
        Turns document text into the units that get embedded. Defaults to
        the whole text as a single unit; pass
        :func:`~rag_ingest.ingestion.chunker.chunk_text` to chunk.
    store:
        Optional persistence backend used by :meth:`persist` and
        :meth:`ingest_directory`.
    metadata_enricher:
        Adds filename-derived metadata to stored chunks. Defaults to
        :class:`~rag_ingest.store.metadata.FilenameMetadata` built from the
        global settings.
    """

    def __init__(
        self,
        extractor: FormatExtractor | None = None,
        embedder: EmbeddingProvider | None = None,
        *,
        splitter: Splitter | None = None,
        store: DocumentStore | None = None,
        metadata_enricher: MetadataEnricher | None = None,
    ) -> None:
        if embedder is None:
            from rag_ingest.embedding.dashscope import DashScopeEmbeddings

            embedder = DashScopeEmbeddings()
        self.extractor = extractor or FormatExtractor()
        self.embedder = embedder
        self.splitter = splitter or _whole_text
        self.store = store
        self.metadata_enricher = metadata_enricher

    # -- public API -----------------------------------------------------------

    def ingest(
        self,
        file_path: str | Path,
        original_filename: str | None = None,
        *,
        cancel_event: threading.Event | None = None,
    ) -> IngestionOutcome:
        """Ingest one file and report what was recovered.

        Returns
        -------
        IngestionOutcome
            :class:`IngestionFailure` when extraction fails,
            :class:`IngestionPartialFailure` when splitting or embedding fails, else
            :class:`IngestionSuccess`.
        """
        source = original_filename or Path(file_path).name

        try:
            document = self.extractor.extract(file_path, original_filename)
        except ExtractionIOError as exc:
            logger.error("✗ %s: extraction failed: %s", source, exc)
            return IngestionFailure(source=source, **error_fields(exc))

        if not document.has_content:
            logger.warning("No text extracted from %s, nothing to embed", source)
            return IngestionSuccess(source=source, document=document)

        chunks: list[str] = []
        try:
            chunks = [chunk for chunk in self.splitter(document.text) if chunk.strip()]
            vectors = self.embedder.embed_documents(chunks, cancel_event=cancel_event)
        except EmbeddingError as exc:
            logger.error("✗ %s: embedding failed after extraction: %s", source, exc)
            return IngestionPartialFailure(source=source, document=document, chunks=chunks, **error_fields(exc))
        except Exception as exc:
            logger.exception("✗ %s: unexpected error after extraction", source)
            return IngestionPartialFailure(source=source, document=document, chunks=chunks, **error_fields(exc))

        logger.info("✓ %s (%d chars, %d chunks)", source, len(document.text), len(chunks))
        return IngestionSuccess(source=source, document=document, chunks=chunks, vectors=vectors)

    def ingest_many(
        self,
        files: Iterable[FileItem],
        *,
        cancel_event: threading.Event | None = None,
    ) -> IngestionReport:
        """Ingest every item of *files* independently.

        Items are paths, or ``(path, original_filename)`` tuples for uploads
        stored under generated names. Once *cancel_event* is set, no further
        files are started and the report covers only those already ingested.
        """
        outcomes: list[IngestionOutcome] = []
        for item in files:
            if _cancelled(cancel_event, len(outcomes)):
                break
            path, name = item if isinstance(item, tuple) else (item, None)
            outcomes.append(self.ingest(path, name, cancel_event=cancel_event))

        report = IngestionReport(outcomes=outcomes)
        logger.info(report.summary())
        return report

    def ingest_directory(
        self,
        directory: str | Path,
        *,
        glob: str = "**/*",
        skip_existing: bool = True,
        cancel_event: threading.Event | None = None,
    ) -> IngestionReport:
        """Ingest every supported file under *directory* and persist successes.

        Sources are identified by their path relative to *directory*. With a
        store attached and *skip_existing* set, sources the store already
        holds are not ingested again.
        """
        root = Path(directory)
        if not root.is_dir():
            raise FileNotFoundError(f"Directory not found: {directory}")

        supported = self.extractor.supported_extensions
        outcomes: list[IngestionOutcome] = []
        for path in sorted(root.glob(glob)):
            if not path.is_file() or path.suffix.lower() not in supported:
                continue
            if _cancelled(cancel_event, len(outcomes)):
                break
            source = path.relative_to(root).as_posix()
            if skip_existing and self._already_stored(source):
                logger.info("Skipping already processed file: %s", source)
                continue

            outcome = self.ingest(path, source, cancel_event=cancel_event)
            outcomes.append(self.persist(outcome))

        report = IngestionReport(outcomes=outcomes)
        logger.info(report.summary())
        return report

    def persist(self, outcome: IngestionOutcome) -> IngestionOutcome:
        """Hand a successful outcome's chunks and vectors to the store.

        Outcomes without vectors, and every outcome when no store is
        attached, pass through unchanged. A store error downgrades the
        outcome to :class:`IngestionPartialFailure`.
        """
        if self.store is None or not isinstance(outcome, IngestionSuccess) or not outcome.vectors:
            return outcome

        try:
            records = build_chunk_records(
                outcome.source,
                outcome.document,
                outcome.chunks,
                outcome.vectors,
                enricher=self.metadata_enricher,
            )
            self.store.add_chunks(records)
        except Exception as exc:
            logger.exception("Failed to store %d chunks for %s", len(outcome.chunks), outcome.source)
            return IngestionPartialFailure(
                source=outcome.source,
                document=outcome.document,
                chunks=outcome.chunks,
                **error_fields(exc),
            )
        return outcome

    # -- internals ------------------------------------------------------------

    def _already_stored(self, source: str) -> bool:
        if self.store is None:
            return False
        try:
            return self.store.has_source(source)
        except Exception:
            logger.warning("Could not check store for %s, ingesting it anyway", source, exc_info=True)
            return False


def _cancelled(cancel_event: threading.Event | None, done: int) -> bool:
    if cancel_event is None or not cancel_event.is_set():
        return False
    logger.warning("Ingestion cancelled after %d documents", done)
    return True
