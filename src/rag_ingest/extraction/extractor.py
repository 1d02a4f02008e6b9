"""Format-aware text extraction with an extension dispatch table.

Usage::

    from rag_ingest.extraction import FormatExtractor

    extractor = FormatExtractor()
    doc = extractor.extract("/tmp/upload-3f2a", "Handbook 2024.pdf")
    print(doc.page_count, doc.text[:80])

New formats are added by registering a strategy, not by editing a
conditional chain::

    extractor.register(".rtf", load_rtf)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Mapping

from rag_ingest.errors import ExtractionIOError
from rag_ingest.extraction import loaders
from rag_ingest.extraction.models import ExtractedDocument

logger = logging.getLogger(__name__)

ExtractionStrategy = Callable[[Path], ExtractedDocument]

DEFAULT_STRATEGIES: dict[str, ExtractionStrategy] = {
    ".pdf": loaders.load_pdf,
    ".docx": loaders.load_docx,
    ".doc": loaders.load_legacy_doc,
    ".xlsx": loaders.load_xlsx,
    ".xls": loaders.load_xls,
    ".md": loaders.load_text,
    ".txt": loaders.load_text,
    ".csv": loaders.load_text,
    ".json": loaders.load_text,
}


def normalize_extension(name: str | Path) -> str:
    """Return the lower-cased suffix of *name* (``""`` when there is none)."""
    return Path(name).suffix.lower()


class FormatExtractor:
    """Select an extraction strategy by file extension.

    Parameters
    ----------
    strategies:
        Extension → strategy mapping. Defaults to :data:`DEFAULT_STRATEGIES`.
        The mapping is copied, so :meth:`register` never leaks between
        instances.
    """

    def __init__(self, strategies: Mapping[str, ExtractionStrategy] | None = None) -> None:
        self._strategies: dict[str, ExtractionStrategy] = {}
        for ext, strategy in (DEFAULT_STRATEGIES if strategies is None else strategies).items():
            self.register(ext, strategy)

    @property
    def supported_extensions(self) -> frozenset[str]:
        return frozenset(self._strategies)

    def register(self, extension: str, strategy: ExtractionStrategy) -> None:
        """Add or replace the strategy used for *extension* (e.g. ``".rtf"``)."""
        ext = extension.lower()
        if not ext.startswith("."):
            ext = f".{ext}"
        self._strategies[ext] = strategy

    def extract(self, file_path: str | Path, original_filename: str | None = None) -> ExtractedDocument:
        """Extract text from *file_path*.

        The extension of *original_filename* wins over the one of
        *file_path*, since uploads are usually stored under generated names.

        Raises
        ------
        ExtractionIOError
            The file does not exist, cannot be read, or its parser failed.
            Unsupported formats never raise; they yield sentinel or empty text.
        """
        path = Path(file_path)
        ext = normalize_extension(original_filename or path)

        if not path.is_file():
            logger.error("Error extracting text from %s: file not found", path)
            raise ExtractionIOError(f"File not found or not a regular file: {path}", path=path)

        strategy = self._strategies.get(ext)
        if strategy is None:
            logger.debug("No extraction strategy for %r (%s); returning empty text", ext, path)
            return ExtractedDocument(text="")

        try:
            return strategy(path)
        except Exception as exc:
            logger.exception("Error extracting text from %s", path)
            raise ExtractionIOError(f"Failed to extract {ext or 'file'} {path}: {exc}", path=path) from exc


_default_extractor = FormatExtractor()


def extract_text_from_file(file_path: str | Path, original_filename: str | None = None) -> ExtractedDocument:
    """Module-level shortcut around a shared default :class:`FormatExtractor`."""
    return _default_extractor.extract(file_path, original_filename)
